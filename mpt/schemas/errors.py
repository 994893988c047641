"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for the trie, the proof verifier and the CLI.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Lookup
    NOT_FOUND = "NOT_FOUND"

    # Encoding & Decoding
    DECODING_ERROR = "DECODING_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Internal structure
    TRIE_CONSISTENCY_ERROR = "TRIE_CONSISTENCY_ERROR"

    # Proof verification
    PROOF_VERIFICATION_FAILED = "PROOF_VERIFICATION_FAILED"
    PROOF_INCOMPLETE = "PROOF_INCOMPLETE"
    MALFORMED_PROOF_NODE = "MALFORMED_PROOF_NODE"
    KEY_NOT_PROVEN = "KEY_NOT_PROVEN"
    PROOF_VERIFICATION_MISMATCH = "PROOF_VERIFICATION_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MptError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the CLI to report failures as JSON without losing the
    machine-readable code.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.KEY_NOT_PROVEN],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "MptException":
        """Convert this error model to a raised exception."""
        return MptException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MptException(Exception):
    """
    Base exception for all trie errors.

    This exception carries structured error information and can be
    converted to/from MptError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MPT_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> MptError:
        """Convert this exception to an MptError model."""
        return MptError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class KeyNotFoundException(MptException, KeyError):
    """Raised by item access when a key is absent from the trie."""

    def __init__(
        self,
        key: bytes,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        full_details["key"] = "0x" + key.hex()
        super().__init__(
            message=f"Key not found: 0x{key.hex()}",
            code=ErrorCodes.NOT_FOUND,
            details=full_details,
        )
        self.key = key


class DecodingException(MptException):
    """Raised when bytes cannot be decoded (nibble buffers, RLP)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.DECODING_ERROR,
            details=details,
        )


class CanonicalizationException(MptException):
    """Raised when a value cannot be canonically encoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class TrieConsistencyException(MptException):
    """
    Raised when the trie reaches a node it does not recognise.

    This is a defect, not a recoverable condition: callers should let it
    propagate.
    """

    def __init__(
        self,
        message: str,
        node_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if node_type:
            full_details["node_type"] = node_type
        super().__init__(
            message=message,
            code=ErrorCodes.TRIE_CONSISTENCY_ERROR,
            details=full_details,
        )


class ProofVerificationException(MptException):
    """Base exception for every proof verification failure."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.PROOF_VERIFICATION_FAILED,
        node_hash: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if node_hash is not None:
            full_details["node_hash"] = "0x" + node_hash.hex()
        super().__init__(
            message=message,
            code=code,
            details=full_details,
        )


class ProofIncompleteException(ProofVerificationException):
    """A hash referenced during verification is missing from the proof."""

    def __init__(
        self,
        message: str,
        node_hash: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_INCOMPLETE,
            node_hash=node_hash,
            details=details,
        )


class MalformedProofNodeException(ProofVerificationException):
    """Stored bytes do not decode into a valid node."""

    def __init__(
        self,
        message: str,
        node_hash: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF_NODE,
            node_hash=node_hash,
            details=details,
        )


class KeyNotProvenException(ProofVerificationException):
    """
    The proof path does not lead to a value for the key.

    Covers both genuine non-membership and an incompatible proof; the two
    cannot be told apart from the proof alone.
    """

    def __init__(
        self,
        message: str,
        node_hash: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.KEY_NOT_PROVEN,
            node_hash=node_hash,
            details=details,
        )


class ProofVerificationMismatchException(ProofVerificationException):
    """A stored node does not hash to the digest it is filed under."""

    def __init__(
        self,
        message: str,
        node_hash: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_VERIFICATION_MISMATCH,
            node_hash=node_hash,
            details=details,
        )
