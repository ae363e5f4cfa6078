"""Constants for the binding tree."""

# Reserved option holding a section's type
TYPE_OPTION = ".type"

# Prefix of reserved options that never become dynamic fields
RESERVED_PREFIX = "."

# Form keys
SUBMIT_KEY = "cbi.submit"
VALUE_PREFIX = "cbid"
OPTIONAL_PREFIX = "cbi.opt"
REMOVE_NAMED_PREFIX = "cbi.rns"
CREATE_NAMED_PREFIX = "cbi.cns"
CREATE_TYPED_PREFIX = "cbi.cts"
REMOVE_TYPED_PREFIX = "cbi.rts"

# Flag literals
FLAG_ENABLED = "1"
FLAG_DISABLED = "0"

# MultiValue store delimiter
DEFAULT_DELIMITER = " "

# Template identifiers
TEMPLATE_NODE = "cbi/node"
TEMPLATE_MAP = "cbi/map"
TEMPLATE_NAMED_SECTION = "cbi/nsection"
TEMPLATE_TYPED_SECTION = "cbi/tsection"
TEMPLATE_VALUE = "cbi/value"
TEMPLATE_FLAG = "cbi/fvalue"
TEMPLATE_LIST_VALUE = "cbi/lvalue"
TEMPLATE_MULTI_VALUE = "cbi/mvalue"

# Log component names
COMPONENT_CBI = "cbi"
COMPONENT_LOADER = "cbi_loader"
COMPONENT_CLI = "cli"


def form_key(*parts: str) -> str:
    """Join form key parts with dots."""
    return ".".join(parts)
