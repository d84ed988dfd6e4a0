"""
Submitter and poller.

Submits a signed envelope and polls ``getTransaction`` until the ledger
reports a terminal status, a deadline passes, or the caller cancels.

Poll responses that fail to parse because of an XDR or schema mismatch
between node and SDK are retried once. If they keep failing while the
status cannot be read, the observation counts as an unparsed NOT_FOUND;
after ``unparsed_not_found_limit`` of those in a row the poller returns
a ``PresumedSuccess`` flagged ``confirmed=False``.
"""

from __future__ import annotations

import asyncio
import re
from typing import Any, Optional, Sequence, Union

from stellar_sdk import SorobanServerAsync
from stellar_sdk.exceptions import BaseRequestError
from stellar_sdk.soroban_rpc import (
    GetTransactionResponse,
    SendTransactionStatus,
)

from flashonstellar.config import PipelineConfig
from flashonstellar.errors import (
    ContractCallError,
    PollCancelledError,
    PollTimeoutError,
    ResponseParsingError,
    SubmissionError,
)
from flashonstellar.protocol.encoder import decode_value
from flashonstellar.protocol.extraction import (
    DEFAULT_STRATEGIES,
    ExtractionStrategy,
    extract_return_value,
)
from flashonstellar.types import (
    ContractMethodResponse,
    PollState,
    PresumedSuccess,
    TransactionStatus,
    UnparsedResult,
)
from flashonstellar.utils.logging import LogContext, get_logger
from flashonstellar.utils.retry import RetryConfig, retry_async

_logger = get_logger(__name__)

Methods = Optional[Union[str, Sequence[str]]]

_FORMAT_MISMATCH = re.compile(
    r"union switch|invalid v\b|invalid type|xdr|input should be|validation error"
    r"|unexpected trailing|field required",
    re.IGNORECASE,
)


def is_format_mismatch(error: BaseException) -> bool:
    """True when ``error`` looks like a response-format mismatch rather than a real failure."""
    if isinstance(error, EOFError):
        return True
    return bool(_FORMAT_MISMATCH.search(str(error)))


class ResponseFormatError(Exception):
    """A poll response that could not be parsed into a known shape."""

    def __init__(self, diagnostic: str) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic


class Submitter:
    """
    Submits signed envelopes and waits for their confirmation.

    Args:
        server: Soroban RPC client.
        config: Poll timing and the unresolved NOT_FOUND policy.
        strategies: Return-value extraction strategies, tried in order.
    """

    def __init__(
        self,
        server: SorobanServerAsync,
        config: PipelineConfig,
        strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
    ) -> None:
        self._server = server
        self._config = config
        self._strategies = tuple(strategies)

    async def submit(
        self,
        signed_payload: str,
        *,
        method: Methods = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """
        Submit ``signed_payload`` and wait for a terminal status.

        Args:
            signed_payload: Signed base64 XDR envelope.
            method: Contract method name(s), attached to errors.
            cancel_event: Setting this event stops polling.

        Raises:
            SubmissionError: Rejected on submission or FAILED on ledger.
            PollTimeoutError: No terminal status within the poll limits.
            PollCancelledError: ``cancel_event`` was set while polling.
            ResponseParsingError: Responses stayed unparseable and
                presumption is disabled.
        """
        try:
            sent = await self._server.send_transaction(signed_payload)
        except BaseRequestError as exc:
            raise SubmissionError("RPC_ERROR", method=method, result_xdr=str(exc)) from exc

        if sent.status is not SendTransactionStatus.PENDING:
            raise SubmissionError(
                sent.status.value,
                method=method,
                tx_hash=sent.hash,
                result_xdr=sent.error_result_xdr,
                events=sent.diagnostic_events_xdr,
            )

        _logger.info("Transaction submitted", extra={"tx_hash": sent.hash})
        return await self.wait_for_confirmation(
            sent.hash, method=method, cancel_event=cancel_event
        )

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        *,
        method: Methods = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContractMethodResponse:
        """Poll ``tx_hash`` until SUCCESS, FAILED, a deadline or cancellation."""
        state = PollState(hash=tx_hash)
        log = LogContext(_logger, tx_hash=tx_hash)
        loop = asyncio.get_running_loop()
        started = loop.time()

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise PollCancelledError(tx_hash, attempts=state.attempts, method=method)

            try:
                response = await self._fetch_with_retry(tx_hash, method)
            except ResponseFormatError as exc:
                if not self._config.presume_success_on_unparsed:
                    raise ResponseParsingError(
                        exc.diagnostic, method=method, tx_hash=tx_hash
                    ) from exc
                state.observe(TransactionStatus.NOT_FOUND, exc.diagnostic)
                log.debug(
                    "Unparsed poll response",
                    extra={
                        "unparsed_not_found": state.unparsed_not_found,
                        "error": exc.diagnostic,
                    },
                )
                if state.unparsed_not_found >= self._config.unparsed_not_found_limit:
                    return self._presume_success(state)
            else:
                status = TransactionStatus(response.status.value)
                state.observe(status)
                log.debug("Polled", extra={"status": status.value, "attempt": state.attempts})
                if status is TransactionStatus.SUCCESS:
                    return self._confirmed(response, state)
                if status is TransactionStatus.FAILED:
                    raise SubmissionError(
                        status.value,
                        method=method,
                        tx_hash=tx_hash,
                        result_xdr=response.result_xdr,
                        events=response.diagnostic_events_xdr,
                    )

            elapsed = loop.time() - started
            self._check_deadline(state, elapsed, method)
            await self._wait(state, elapsed, method, cancel_event)

    async def _fetch_with_retry(
        self, tx_hash: str, method: Methods
    ) -> GetTransactionResponse:
        async def fetch() -> GetTransactionResponse:
            return await self._fetch(tx_hash, method)

        return await retry_async(
            fetch,
            RetryConfig(
                max_attempts=2,
                delay_ms=int(self._config.parse_retry_delay * 1000),
                retryable_errors=(ResponseFormatError,),
            ),
        )

    async def _fetch(self, tx_hash: str, method: Methods) -> GetTransactionResponse:
        try:
            return await self._server.get_transaction(tx_hash)
        except BaseRequestError as exc:
            raise ContractCallError(
                f"getTransaction failed: {exc}",
                code="RPC_ERROR",
                method=method,
                tx_hash=tx_hash,
            ) from exc
        except (ValueError, EOFError) as exc:
            if is_format_mismatch(exc):
                raise ResponseFormatError(str(exc)) from exc
            raise ResponseParsingError(str(exc), method=method, tx_hash=tx_hash) from exc

    def _check_deadline(self, state: PollState, elapsed: float, method: Methods) -> None:
        max_attempts = self._config.max_poll_attempts
        max_duration = self._config.max_poll_duration
        if (max_attempts is not None and state.attempts >= max_attempts) or (
            max_duration is not None and elapsed >= max_duration
        ):
            raise PollTimeoutError(
                state.hash, attempts=state.attempts, elapsed=elapsed, method=method
            )

    async def _wait(
        self,
        state: PollState,
        elapsed: float,
        method: Methods,
        cancel_event: Optional[asyncio.Event],
    ) -> None:
        interval = self._config.poll_interval
        if self._config.max_poll_duration is not None:
            interval = max(0.0, min(interval, self._config.max_poll_duration - elapsed))

        if cancel_event is None:
            await asyncio.sleep(interval)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            return
        raise PollCancelledError(state.hash, attempts=state.attempts, method=method)

    def _confirmed(
        self, response: GetTransactionResponse, state: PollState
    ) -> ContractMethodResponse:
        value, strategy = extract_return_value(response, self._strategies)
        result: Any
        if strategy is None:
            _logger.warning(
                "No return value strategy applied; passing raw status through",
                extra={"tx_hash": state.hash},
            )
            result = UnparsedResult(
                tx_hash=state.hash,
                status=TransactionStatus.SUCCESS,
                raw=response.model_dump(by_alias=True, exclude_none=True),
            )
        else:
            result = decode_value(value)

        _logger.info(
            "Transaction confirmed",
            extra={"tx_hash": state.hash, "attempts": state.attempts, "parser": strategy},
        )
        return ContractMethodResponse(
            is_success=True,
            is_read_only=False,
            result=result,
            tx_hash=state.hash,
            confirmed=True,
            parser=strategy,
        )

    def _presume_success(self, state: PollState) -> ContractMethodResponse:
        _logger.warning(
            "Presuming success for unresolved transaction; re-verify before relying on it",
            extra={
                "tx_hash": state.hash,
                "attempts": state.attempts,
                "unparsed_not_found": state.unparsed_not_found,
            },
        )
        return ContractMethodResponse(
            is_success=True,
            is_read_only=False,
            result=PresumedSuccess(tx_hash=state.hash, diagnostics=tuple(state.diagnostics)),
            tx_hash=state.hash,
            confirmed=False,
        )
