"""Customer persistence logic.

Each operation is one storage call. Write-path store failures surface as
`ValidationError` (400); read-path failures as `StorageError` (500).
"""

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from orderdesk.common.db import MongoStore, parse_object_id, to_public
from orderdesk.common.errors import StorageError, ValidationError
from orderdesk.common.logging import logger
from orderdesk.common.metrics import customers_created_total
from orderdesk.services.customers.schemas import CustomerCreate, CustomerUpdate


class CustomerService:
    """Create/list/update/delete over the `customers` collection."""

    def __init__(self, store: MongoStore, service_name: str = "orderdesk") -> None:
        self.store = store
        self.service_name = service_name

    def create(self, req: CustomerCreate) -> dict:
        doc = req.model_dump(exclude_none=True)
        try:
            result = self.store.customers.insert_one(doc)
        except DuplicateKeyError as exc:
            raise ValidationError(f"duplicate key: a customer with email {req.email!r} already exists") from exc
        except PyMongoError as exc:
            raise ValidationError(str(exc)) from exc
        doc["_id"] = result.inserted_id
        customers_created_total.labels(service=self.service_name).inc()
        logger.info("customer_created customer_id=%s", result.inserted_id)
        return to_public(doc)

    def list_all(self) -> list[dict]:
        try:
            return [to_public(doc) for doc in self.store.customers.find()]
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc

    def update_partial(self, customer_id: str, req: CustomerUpdate) -> dict | None:
        """Apply the fields present in `req`; returns None when the id is unknown."""

        oid = parse_object_id(customer_id)
        changes = req.model_dump(exclude_unset=True)
        try:
            if not changes:
                return to_public(self.store.customers.find_one({"_id": oid}))
            doc = self.store.customers.find_one_and_update(
                {"_id": oid},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise ValidationError(f"duplicate key: a customer with email {changes.get('email')!r} already exists") from exc
        except PyMongoError as exc:
            raise ValidationError(str(exc)) from exc
        logger.info("customer_updated customer_id=%s fields=%s found=%s", oid, sorted(changes), doc is not None)
        return to_public(doc)

    def delete(self, customer_id: str) -> None:
        # Orders referencing this customer are left untouched.
        oid = parse_object_id(customer_id)
        try:
            result = self.store.customers.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise ValidationError(str(exc)) from exc
        logger.info("customer_deleted customer_id=%s deleted=%s", oid, result.deleted_count)
