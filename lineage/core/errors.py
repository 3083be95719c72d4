from typing import Any, Dict, Optional


class LineageError(Exception):
    """
    Base for every error the relationship layer raises on purpose.
    The API maps these to responses by status_code, never by message text.
    """

    error_code = "LINEAGE_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', status_code={self.status_code})"


class SelfRelationshipError(LineageError):
    error_code = "SELF_RELATIONSHIP"
    status_code = 400

    def __init__(self, person_id: str):
        super().__init__(
            "Cannot create relationship with self",
            details={"person_id": person_id},
        )


class DuplicateRelationshipError(LineageError):
    error_code = "DUPLICATE_RELATIONSHIP"
    status_code = 400

    def __init__(self, person_id: str, related_person_id: str, type: str):
        super().__init__(
            "This relationship already exists",
            details={
                "person_id": person_id,
                "related_person_id": related_person_id,
                "type": type,
            },
        )


class PersonNotFoundError(LineageError):
    error_code = "PERSON_NOT_FOUND"
    status_code = 404

    def __init__(self, person_id: Optional[str] = None, message: Optional[str] = None):
        if not message:
            message = f"Person '{person_id}' not found" if person_id else "Person not found"
        super().__init__(message, details={"person_id": person_id})


class RelationshipNotFoundError(LineageError):
    error_code = "RELATIONSHIP_NOT_FOUND"
    status_code = 404

    def __init__(self, relationship_id: str):
        super().__init__(
            "Relationship not found",
            details={"relationship_id": relationship_id},
        )


class InvalidPaginationError(LineageError):
    error_code = "INVALID_PAGINATION"
    status_code = 400

    def __init__(self, page: int, limit: int, max_limit: int):
        super().__init__(
            f"page must be >= 1, limit must be between 1 and {max_limit}",
            details={"page": page, "limit": limit},
        )
