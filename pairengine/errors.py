"""Pair engine error classes.

Every failure of a pair operation is one of these. They propagate to the
caller unchanged; the surrounding Chain transaction is responsible for
rolling back any partial effects.
"""


class PairError(Exception):
    """Base error for pair and factory operations."""

    pass


class Reentrant(PairError):
    """A mutating entry point was called while the pair was locked."""

    pass


class Unauthorized(PairError):
    """Caller is not permitted to perform this operation (or pair already bound)."""

    pass


class ReserveOverflow(PairError):
    """A balance does not fit in the 112-bit reserve field."""

    pass


class InsufficientLiquidityMinted(PairError):
    """Deposit would mint zero (or fewer) shares."""

    pass


class InsufficientLiquidityBurned(PairError):
    """Redemption would pay out zero of either asset."""

    pass


class InsufficientOutputAmount(PairError):
    """Swap requested no output at all."""

    pass


class InsufficientLiquidity(PairError):
    """Swap requested an output at or above the available reserve."""

    pass


class InvalidRecipient(PairError):
    """Swap recipient is one of the pair's own assets."""

    pass


class InsufficientInputAmount(PairError):
    """Swap observed no input on either side."""

    pass


class InvariantViolation(PairError):
    """Fee-adjusted reserve product decreased (the K check)."""

    pass


class TransferFailed(PairError):
    """An asset transfer reported failure."""

    pass


class CallbackFailed(PairError):
    """Swap payload was given but the recipient cannot receive callbacks."""

    pass


# =============================================================================
# Factory errors
# =============================================================================


class IdenticalAddresses(PairError):
    """Both assets of a pair are the same."""

    pass


class ZeroAddress(PairError):
    """An asset of a pair is the zero address."""

    pass


class PairExists(PairError):
    """A pair for this asset pair has already been created."""

    pass


class Uninitialized(PairError):
    """Pair has not been bound to its assets yet."""

    pass
