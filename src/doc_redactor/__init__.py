"""doc-redactor — local PII detection and redaction for PDF and text documents."""

from .redactor import Redactor, RedactorConfig, DEFAULT_MODES, apply_redaction, make_tag, redact_file
from .flagger import Flagger, CallableFlagger, PresidioFlagger
from .config import create_redactor, load_config, load_from_yaml
from .errors import RedactorError, ExtractionError, ReportWriteError, ConfigError
from .types import Span, LayoutLine, FlagProposal, RedactionResult

__all__ = [
    "Redactor", "RedactorConfig", "DEFAULT_MODES",
    "apply_redaction", "make_tag", "redact_file",
    "Flagger", "CallableFlagger", "PresidioFlagger",
    "create_redactor", "load_config", "load_from_yaml",
    "RedactorError", "ExtractionError", "ReportWriteError", "ConfigError",
    "Span", "LayoutLine", "FlagProposal", "RedactionResult",
]
__version__ = "0.1.0"
