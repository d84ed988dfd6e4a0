"""
Preparer.

Attaches Soroban resource data, authorization entries and resource fees
to a write-classified envelope, producing the payload handed to the signer.
"""

from __future__ import annotations

from typing import Sequence

from stellar_sdk import SorobanServerAsync, TransactionEnvelope
from stellar_sdk.exceptions import BaseRequestError, PrepareTransactionException

from flashonstellar.errors import PreparationError
from flashonstellar.protocol.simulator import SimulationOutcome
from flashonstellar.utils.logging import get_logger

_logger = get_logger(__name__)


class Preparer:
    """Runs the network prepare step on top of an existing simulation."""

    def __init__(self, server: SorobanServerAsync) -> None:
        self._server = server

    async def prepare(
        self,
        envelope: TransactionEnvelope,
        simulation: SimulationOutcome,
        *,
        methods: Sequence[str] = (),
    ) -> str:
        """
        Return the final unsigned base64 XDR envelope.

        The simulation already obtained by the classifier is reused, so the
        node is not asked to dry-run the same envelope twice.

        Raises:
            PreparationError: If the envelope cannot be assembled, including
                a write envelope that does not hold exactly one operation.
        """
        operations = envelope.transaction.operations
        if len(operations) != 1:
            raise PreparationError(
                f"a write transaction must hold exactly one contract operation, got {len(operations)}",
                method=list(methods),
                details={"operations": len(operations)},
            )

        try:
            prepared = await self._server.prepare_transaction(
                envelope, simulation.response
            )
        except PrepareTransactionException as exc:
            sim = exc.simulate_transaction_response
            raise PreparationError(
                exc.message,
                method=list(methods),
                details={"simulation_error": sim.error if sim else None},
            ) from exc
        except BaseRequestError as exc:
            raise PreparationError(str(exc), method=list(methods)) from exc
        except ValueError as exc:
            # the sdk could not assemble the envelope from the simulation
            raise PreparationError(str(exc), method=list(methods)) from exc

        payload = prepared.to_xdr()
        _logger.debug(
            "Prepared envelope",
            extra={"methods": ",".join(methods), "fee": prepared.transaction.fee},
        )
        return payload
