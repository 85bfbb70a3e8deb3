"""Constants for urlhash."""

import re

# Every fragment string starts with this character
HASH_MARKER = "#"

# Default decode-side tokens
DEFAULT_GET_SEPARATE = ";"
DEFAULT_GET_ASSIGN = "="
DEFAULT_GET_TRUE = re.compile(r"^(true|yes)$", re.IGNORECASE)
DEFAULT_GET_FALSE = re.compile(r"^(false|no)$", re.IGNORECASE)

# Default encode-side tokens
DEFAULT_SET_SEPARATE = ";"
DEFAULT_SET_ASSIGN = "="
DEFAULT_SET_TRUE = "true"
DEFAULT_SET_FALSE = "false"

# Shapes of embedded JSON values
JSON_ALL = re.compile(r"^(\[.*?\]|\{.*?\})$")
JSON_ARR = re.compile(r"^\[.*?\]$")
JSON_OBJ = re.compile(r"^\{.*?\}$")

# Compact separators, same output as JavaScript's JSON.stringify
JSON_SEPARATORS = (",", ":")

# Grammar token names
SPLIT_FIELDS = ("separate", "assign")
BOOLEAN_FIELDS = ("true", "false")
GRAMMAR_FIELDS = SPLIT_FIELDS + BOOLEAN_FIELDS

# Values accepted by the ``json`` option
JSON_MODE_ARRAY = "array"
JSON_MODE_OBJECT = "object"

# Escapes of these characters survive URI decoding, as with decodeURI()
URI_RESERVED = ";/?:@&=+$,#"
