"""Core constants for jdocsite."""

# The default JDK API location
JDK_API_URL = "https://docs.oracle.com/en/java/javase/16/docs/api/"

# External documentation overview page and the class of the element holding
# the listed names
OVERVIEW_PAGE = "overview-tree.html"
OVERVIEW_SELECTOR_CLASS = "horizontal"

# Fixed backoff and capped attempts for external documentation fetches
DEFAULT_FETCH_RETRY_ATTEMPTS = 20
DEFAULT_FETCH_RETRY_DELAY = 0.2

# Source file convention
JAVA_SOURCE_SUFFIX = ".java"
DEFAULT_SAMPLE_SUFFIX = "Test.java"

# Annotations stripped from sample code
NOISE_ANNOTATIONS = ("Override", "SuppressWarnings", "Test")

# The universal root type, skipped when collecting supertypes
ROOT_OBJECT_TYPE = "java.lang.Object"
