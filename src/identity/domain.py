"""Identity bounded context: user accounts and login sessions."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

identity = Domain(name="identity")
