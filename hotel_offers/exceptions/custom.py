class DocumentNotFoundError(Exception):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        self.message = f"{collection}/{doc_id} not found"
        super().__init__(self.message)


class OfferValidationError(Exception):
    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class OfferStateError(Exception):
    def __init__(self, message: str, offer_id: str | None = None):
        self.message = message
        self.offer_id = offer_id
        super().__init__(message)


class PermissionDeniedError(Exception):
    def __init__(self, message: str, actor_id: str | None = None):
        self.message = message
        self.actor_id = actor_id
        super().__init__(message)


class DuplicateOfferError(Exception):
    def __init__(self, request_id: str, hotel_id: str, existing_offer_id: str):
        self.request_id = request_id
        self.hotel_id = hotel_id
        self.existing_offer_id = existing_offer_id
        self.message = (
            f"Hotel {hotel_id} already has offer {existing_offer_id} "
            f"for request {request_id}"
        )
        super().__init__(self.message)


class RequestExpiredError(Exception):
    def __init__(self, request_id: str):
        self.request_id = request_id
        self.message = f"Request {request_id} is no longer accepting offers"
        super().__init__(self.message)


class NotificationError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
