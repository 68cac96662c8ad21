"""
Gateway routing template for the gateway functions.

Produces the OpenAPI 3.0 document the provisioning layer hands to API
Gateway: one ``POST /<name>`` route per handler, proxied to the function's
invoke ARN.
"""

from typing import Any, Dict, List, Optional

from aws_lambda_powertools.logging import Logger

from deploy.settings import DeploySettings
from service.models.output import ErrorOutput, MessageOutput

logger = Logger(service='gateway-functions-build')

OPENAPI_VERSION = '3.0.3'
INTEGRATION_KEY = 'x-amazon-apigateway-integration'
PAYLOAD_FORMAT_VERSION = '2.0'


def route_path(name: str) -> str:
    """Route path of a handler; the name is used verbatim."""
    return f'/{name}'


def invoke_arn_placeholder(name: str) -> str:
    """Template variable the provisioning tool replaces with the invoke ARN."""
    return '${%s_invoke_arn}' % name


def _component_schemas() -> Dict[str, Any]:
    schemas: Dict[str, Any] = {}
    for model in (MessageOutput, ErrorOutput):
        schema = model.model_json_schema(ref_template='#/components/schemas/{model}')
        schemas.update(schema.pop('$defs', {}))
        schemas[model.__name__] = schema
    return schemas


def _route(name: str, uri: str, timeout_seconds: int) -> Dict[str, Any]:
    return {
        'post': {
            'operationId': f'invoke_{name}',
            'summary': f'Invoke {name}',
            'requestBody': {
                'required': True,
                'description': 'Base64 encoded JSON document',
                'content': {
                    'text/plain': {
                        'schema': {'type': 'string', 'format': 'byte'},
                    },
                },
            },
            'responses': {
                '200': {
                    'description': 'Payload accepted',
                    'content': {
                        'application/json': {
                            'schema': {'$ref': '#/components/schemas/MessageOutput'},
                        },
                    },
                },
                '400': {
                    'description': 'Body missing, not base64 or not JSON',
                    'content': {
                        'application/json': {
                            'schema': {'$ref': '#/components/schemas/ErrorOutput'},
                        },
                    },
                },
            },
            INTEGRATION_KEY: {
                'type': 'aws_proxy',
                'httpMethod': 'POST',
                'uri': uri,
                'payloadFormatVersion': PAYLOAD_FORMAT_VERSION,
                'timeoutInMillis': timeout_seconds * 1000,
            },
        }
    }


def build_gateway_spec(
    settings: DeploySettings,
    invoke_arns: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Generate the gateway routing template.

    Args:
        settings: deployment settings naming the handlers
        invoke_arns: known invoke ARNs by handler name; others get a placeholder

    Returns:
        OpenAPI specification dictionary
    """
    invoke_arns = invoke_arns or {}
    unknown = sorted(set(invoke_arns) - set(settings.handlers))
    if unknown:
        raise ValueError(f'Invoke ARNs given for unknown handlers: {", ".join(unknown)}')

    paths = {
        route_path(name): _route(
            name,
            invoke_arns.get(name, invoke_arn_placeholder(name)),
            settings.timeout_seconds,
        )
        for name in settings.handlers
    }

    return {
        'openapi': OPENAPI_VERSION,
        'info': {
            'title': settings.api_title,
            'version': settings.api_version,
            'description': 'POST a base64 encoded JSON document to a function route.',
        },
        'x-amazon-apigateway-region': settings.region,
        'paths': paths,
        'components': {'schemas': _component_schemas()},
    }


def validate_gateway_spec(spec: Dict[str, Any]) -> bool:
    """
    Validate the gateway routing template.

    Every path must expose exactly one ``post`` operation with a proxy
    integration.

    Returns:
        True if valid, False otherwise
    """
    problems: List[str] = []

    for field in ('openapi', 'info', 'paths'):
        if field not in spec:
            problems.append(f"Missing required field '{field}'")

    for field in ('title', 'version'):
        if field not in spec.get('info', {}):
            problems.append(f"Missing required field 'info.{field}'")

    if not str(spec.get('openapi', '')).startswith('3.'):
        problems.append(f"OpenAPI version '{spec.get('openapi')}' is not 3.x")

    for path, operations in spec.get('paths', {}).items():
        if list(operations) != ['post']:
            problems.append(f'{path} must expose only POST')
            continue
        integration = operations['post'].get(INTEGRATION_KEY, {})
        if integration.get('type') != 'aws_proxy' or not integration.get('uri'):
            problems.append(f'{path} has no proxy integration')

    for problem in problems:
        logger.error('Invalid gateway template', extra={'problem': problem})

    return not problems
