"""Composite construct hosting an Astro build on CloudFront."""

from dataclasses import dataclass
from pathlib import Path

from aws_cdk import Duration, RemovalPolicy
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_s3 as s3
from aws_cdk import aws_s3_deployment as s3_deploy
from constructs import Construct

API_PATH_PATTERN = "/api/*"

# Directory-style URLs map to the index.html Astro writes for each page
INDEX_REWRITE_CODE = """
function handler(event) {
  var request = event.request;
  var uri = request.uri || "/";

  if (uri.endsWith("/")) {
    request.uri = uri + "index.html";
    return request;
  }

  if (!uri.includes(".")) {
    request.uri = uri + "/index.html";
    return request;
  }

  return request;
}
""".strip()


@dataclass
class DistributionOptions:
  """Overrides for the CloudFront distribution."""

  cache_policy: cloudfront.ICachePolicy | None = None
  api_cache_policy: cloudfront.ICachePolicy | None = None
  response_headers_policy: cloudfront.IResponseHeadersPolicy | None = None
  certificate: acm.ICertificate | None = None
  comment: str | None = None
  domain_names: list[str] | None = None
  error_responses: list[cloudfront.ErrorResponse] | None = None
  log_bucket: s3.IBucket | None = None
  log_file_prefix: str | None = None
  price_class: cloudfront.PriceClass | None = None
  web_acl_id: str | None = None


@dataclass
class FunctionOptions:
  """Overrides for the server-side rendering function."""

  runtime: lambda_.Runtime | None = None
  architecture: lambda_.Architecture | None = None
  tracing: lambda_.Tracing | None = None
  environment: dict[str, str] | None = None
  memory_size: int = 512
  timeout: Duration | None = None


@dataclass
class BucketOptions:
  """Overrides for the content bucket."""

  server_access_logs_bucket: s3.IBucket | None = None
  server_access_logs_prefix: str | None = None
  removal_policy: RemovalPolicy = RemovalPolicy.RETAIN


def resolve_page_path(assets_dir: Path, page_path: str) -> str:
  """Map a page path such as ``/403`` to the object a static build stores for it."""
  relative = page_path.lstrip("/")
  if not relative or "." in Path(relative).name:
    return page_path
  if (assets_dir / relative / "index.html").is_file():
    return f"/{relative}/index.html"
  if (assets_dir / f"{relative}.html").is_file():
    return f"/{relative}.html"
  return page_path


class WebApp(Construct):
  """CloudFront distribution, content bucket and optional SSR function.

  The build output decides the shape: when ``out_dir`` holds a ``lambda``
  directory the site is server-rendered, the function serves every request
  by default and the files in ``client`` are served from S3. Otherwise the
  whole of ``out_dir`` is uploaded and served from S3, with a viewer-request
  function resolving directory URLs to their ``index.html``.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    out_dir: Path | str,
    distribution_options: DistributionOptions | None = None,
    function_options: FunctionOptions | None = None,
    bucket_options: BucketOptions | None = None,
  ) -> None:
    super().__init__(scope, id)

    out_dir = Path(out_dir)
    distribution_options = distribution_options or DistributionOptions()
    function_options = function_options or FunctionOptions()
    bucket_options = bucket_options or BucketOptions()

    self.is_ssr = (out_dir / "lambda").is_dir()
    assets_dir = out_dir / "client" if self.is_ssr else out_dir
    has_assets = assets_dir.is_dir()

    self.bucket = s3.Bucket(
      self,
      "Bucket",
      block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
      encryption=s3.BucketEncryption.S3_MANAGED,
      enforce_ssl=True,
      server_access_logs_bucket=bucket_options.server_access_logs_bucket,
      server_access_logs_prefix=bucket_options.server_access_logs_prefix,
      removal_policy=bucket_options.removal_policy,
      auto_delete_objects=bucket_options.removal_policy == RemovalPolicy.DESTROY,
    )
    bucket_origin = origins.S3BucketOrigin.with_origin_access_control(self.bucket)

    self.function: lambda_.Function | None = None
    self.function_url: lambda_.FunctionUrl | None = None
    self.rewrite_function: cloudfront.Function | None = None
    error_responses = distribution_options.error_responses

    if self.is_ssr:
      self.function = lambda_.Function(
        self,
        "Function",
        code=lambda_.Code.from_asset(str(out_dir / "lambda")),
        handler="index.handler",
        runtime=function_options.runtime or lambda_.Runtime.NODEJS_20_X,
        architecture=function_options.architecture,
        tracing=function_options.tracing,
        environment=function_options.environment,
        memory_size=function_options.memory_size,
        timeout=function_options.timeout or Duration.seconds(10),
      )
      self.function_url = self.function.add_function_url(
        auth_type=lambda_.FunctionUrlAuthType.NONE,
      )
      function_origin = origins.FunctionUrlOrigin(self.function_url)

      default_behavior = cloudfront.BehaviorOptions(
        origin=function_origin,
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_ALL,
        cache_policy=distribution_options.cache_policy,
        origin_request_policy=cloudfront.OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER,
        response_headers_policy=distribution_options.response_headers_policy,
      )

      # Each top-level client file or directory is served straight from S3
      additional_behaviors: dict[str, cloudfront.BehaviorOptions] = {}
      for entry in sorted(assets_dir.iterdir()) if has_assets else []:
        path_pattern = f"/{entry.name}/*" if entry.is_dir() else f"/{entry.name}"
        additional_behaviors[path_pattern] = cloudfront.BehaviorOptions(
          origin=bucket_origin,
          viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
          cache_policy=distribution_options.cache_policy,
          response_headers_policy=distribution_options.response_headers_policy,
        )

      # The API always belongs to the function, even over a client/api directory
      additional_behaviors[API_PATH_PATTERN] = cloudfront.BehaviorOptions(
        origin=function_origin,
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_ALL,
        cache_policy=distribution_options.api_cache_policy
        or cloudfront.CachePolicy.CACHING_DISABLED,
        origin_request_policy=cloudfront.OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER,
      )
      default_root_object = None
    else:
      self.rewrite_function = cloudfront.Function(
        self,
        "IndexRewriteFunction",
        code=cloudfront.FunctionCode.from_inline(INDEX_REWRITE_CODE),
      )
      default_behavior = cloudfront.BehaviorOptions(
        origin=bucket_origin,
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD,
        cached_methods=cloudfront.CachedMethods.CACHE_GET_HEAD,
        cache_policy=distribution_options.cache_policy,
        response_headers_policy=distribution_options.response_headers_policy,
        function_associations=[
          cloudfront.FunctionAssociation(
            event_type=cloudfront.FunctionEventType.VIEWER_REQUEST,
            function=self.rewrite_function,
          )
        ],
      )
      additional_behaviors = None
      default_root_object = "index.html"

      # Error pages are fetched without viewer-request functions
      if error_responses and has_assets:
        error_responses = [
          cloudfront.ErrorResponse(
            http_status=response.http_status,
            response_http_status=response.response_http_status,
            response_page_path=(
              resolve_page_path(assets_dir, response.response_page_path)
              if response.response_page_path
              else None
            ),
            ttl=response.ttl,
          )
          for response in error_responses
        ]

    self.distribution = cloudfront.Distribution(
      self,
      "Distribution",
      default_behavior=default_behavior,
      additional_behaviors=additional_behaviors or None,
      default_root_object=default_root_object,
      certificate=distribution_options.certificate,
      comment=distribution_options.comment,
      domain_names=distribution_options.domain_names,
      error_responses=error_responses,
      log_bucket=distribution_options.log_bucket,
      log_file_prefix=distribution_options.log_file_prefix,
      price_class=distribution_options.price_class,
      web_acl_id=distribution_options.web_acl_id,
      minimum_protocol_version=cloudfront.SecurityPolicyProtocol.TLS_V1_2_2021,
    )

    self.deployment: s3_deploy.BucketDeployment | None = None
    if has_assets:
      self.deployment = s3_deploy.BucketDeployment(
        self,
        "Deployment",
        sources=[s3_deploy.Source.asset(str(assets_dir))],
        destination_bucket=self.bucket,
        distribution=self.distribution,
        distribution_paths=["/*"],
      )
