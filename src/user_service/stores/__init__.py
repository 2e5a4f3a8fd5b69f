"""Store subpackage — imports trigger @register_store decorators."""

from user_service.stores.dynamodb import DynamoDBUserStore  # noqa: F401
from user_service.stores.json_local import JSONLocalUserStore  # noqa: F401
from user_service.stores.sql_database import SQLAlchemyUserStore  # noqa: F401
