"""
Description:
This module contains precompiled regex patterns for recovering interview questions from raw model output.

Dependencies:
- re: Python's built-in regular expression module for pattern matching.

Author: @kcaparas1630

"""

import re

# Compile regex patterns once for better performance
REGEX_PATTERNS = {
    'code_fence': re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL),
    'quoted_item_boundary': re.compile(r"\"\s*,\s*\""),
    'leading_ordinal': re.compile(r"^\s*(?:\d+\s*[\.\):]|[-*•])\s*"),
    'fence_marker': re.compile(r"^```"),
}
