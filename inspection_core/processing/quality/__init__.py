from .external_quality_sync import ExternalQualitySync
from .status_parser import all_ok_word, map_ok_to_sequence, parse_status_response

__all__ = ["ExternalQualitySync", "all_ok_word", "map_ok_to_sequence", "parse_status_response"]
