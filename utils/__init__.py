from utils.exceptions import (
    LocationSpyError,
    InvalidInputError,
    ConfigurationError,
    SourceCancelled,
)
from utils.log_config import get_logger
from utils.text_cleaner import clean_location, is_valid_query
