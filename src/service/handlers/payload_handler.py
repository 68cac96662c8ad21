"""
Payload handler factory.

Every gateway function runs the same contract: decode the base64 body,
parse it as JSON, hand the payload to the observer and answer with a fixed
message. ``make_handler`` builds one handler per message so each function
module is a single binding.
"""

from typing import Any, Callable, Dict, Optional

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.observers import PayloadObserver, resolve_observer
from service.handlers.utils.responses import fault_response, message_response
from service.logic.payload import decode_event_body
from service.models.payload import PayloadFault

LambdaHandler = Callable[[Dict[str, Any], LambdaContext], Dict[str, Any]]


def make_handler(message: str, observer: Optional[PayloadObserver] = None) -> LambdaHandler:
    """
    Build a Lambda handler answering with ``message``.

    Args:
        message: identifying string returned in the response body
        observer: payload sink; resolved from the environment when omitted

    Returns:
        Lambda handler taking an API Gateway proxy event and context
    """
    payload_observer = observer or resolve_observer()

    @metrics.log_metrics(capture_cold_start_metric=True)
    @tracer.capture_lambda_handler
    @logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_HTTP)
    def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
        tracer.put_annotation("handler_message", message)

        logger.info(
            "Lambda invocation started",
            extra={
                "request_id": context.aws_request_id,
                "function_name": context.function_name,
                "function_version": context.function_version,
                "remaining_time_ms": context.get_remaining_time_in_millis(),
            },
        )

        result = decode_event_body(event)
        if isinstance(result, PayloadFault):
            logger.warning(
                "Rejected request body",
                extra={"fault": result.kind.value, "detail": result.detail},
            )
            metrics.add_metric(name="PayloadFaults", unit=MetricUnit.Count, value=1)
            return fault_response(result)

        payload_observer.observe(result.value)
        metrics.add_metric(name="PayloadsAccepted", unit=MetricUnit.Count, value=1)

        logger.info("Lambda invocation completed successfully")
        return message_response(message)

    return handler
