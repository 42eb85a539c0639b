"""Security utilities -- prompt injection defense and input validation."""
from .prompt_guard import wrap_user_content, detect_injection_attempt, sanitize_for_prompt
from .validators import (
    split_rules,
    validate_document_upload,
    validate_forbidden_upload,
    validate_length,
    validate_list_size,
    validate_not_empty,
)
