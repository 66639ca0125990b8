class LexivaultError(Exception):
    """Base class for lexivault errors."""


class ItemNotFoundError(LexivaultError):
    def __init__(self, item_id: str):
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id


class SessionStateError(LexivaultError):
    """Raised when a session is driven outside its state machine (e.g. answering after completion)."""


class CollectionNotFoundError(LexivaultError):
    def __init__(self, collection_id: str):
        super().__init__(f"Collection not found: {collection_id}")
        self.collection_id = collection_id
