"""
Wire schema constants for the CloudFront distribution API.
"""

API_VERSION = "2008-06-30"
HOST = "cloudfront.amazonaws.com"
HTTPS_PORT = 443


def namespace_for(api_version: str) -> str:
    """Return the XML namespace URI used by documents of ``api_version``."""
    return f"http://cloudfront.amazonaws.com/doc/{api_version}/"


NAMESPACE = namespace_for(API_VERSION)

# Root elements
DISTRIBUTION = "Distribution"
DISTRIBUTION_LIST = "DistributionList"
DISTRIBUTION_CONFIG = "DistributionConfig"
ERROR_RESPONSE = "ErrorResponse"

# Distribution fields
ID = "Id"
DOMAIN_NAME = "DomainName"
LAST_MODIFIED_TIME = "LastModifiedTime"
STATUS = "Status"

# DistributionList fields
IS_TRUNCATED = "IsTruncated"
MARKER = "Marker"
MAX_ITEMS = "MaxItems"
NEXT_MARKER = "NextMarker"
DISTRIBUTION_SUMMARY = "DistributionSummary"

# DistributionConfig fields, in wire order
ORIGIN = "Origin"
CALLER_REFERENCE = "CallerReference"
CNAME = "CNAME"
COMMENT = "Comment"
ENABLED = "Enabled"

# ErrorResponse fields
ERROR = "Error"
ERROR_TYPE = "Type"
ERROR_CODE = "Code"
ERROR_MESSAGE = "Message"
REQUEST_ID = "RequestId"

# Distribution status values
STATUS_DEPLOYED = "Deployed"
STATUS_IN_PROGRESS = "InProgress"
