"""
HTTP handler for the sendUpdateNotification endpoint.

  POST  x-api-key: <secret>
        {"versionName": "1.4.2", "versionCode": 42, "message": "...", "forceUpdate": false}

Validation runs in order (method, API key, body) and the FCM gateway is only
reached once all three pass.
"""

import hmac
import json
import logging

from firebase_functions import https_fn

from gateway import GatewayError
from update_notification import (
    MissingFieldsError,
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    UpdateNotificationRequest,
    build_update_message,
)

API_KEY_HEADER = 'x-api-key'

CORS_HEADERS = {'Access-Control-Allow-Origin': '*'}
PREFLIGHT_HEADERS = {
    'Access-Control-Allow-Methods': 'POST',
    'Access-Control-Allow-Headers': f'Content-Type, {API_KEY_HEADER}',
}


class DispatchError(Exception):
    status = 500

    def body(self) -> dict:
        return {"error": str(self)}


class MethodNotAllowed(DispatchError):
    status = 405

    def __init__(self):
        super().__init__("Method not allowed. Use POST.")


class Unauthorized(DispatchError):
    status = 403

    def __init__(self):
        super().__init__("Unauthorized")


class BadRequest(DispatchError):
    status = 400

    def body(self) -> dict:
        return {
            "error": str(self),
            "required": list(REQUIRED_FIELDS),
            "optional": list(OPTIONAL_FIELDS),
        }


class GatewayFailure(DispatchError):
    status = 500

    def body(self) -> dict:
        return {"success": False, "error": str(self)}


def json_response(payload: dict, status: int = 200) -> https_fn.Response:
    return https_fn.Response(
        json.dumps(payload, default=str),
        status=status,
        mimetype="application/json",
        headers=CORS_HEADERS,
    )


class UpdateNotificationHandler:
    """
    Authenticates, validates and dispatches one update broadcast per request.
    Holds no per-request state, so one instance can serve any number of calls.
    """

    def __init__(self, api_key, gateway):
        # Firestore may hold a non-string api_key; only a non-empty string counts as configured
        self.api_key = api_key if isinstance(api_key, str) else ''
        self.gateway = gateway

    def handle(self, req: https_fn.Request) -> https_fn.Response:
        if req.method == 'OPTIONS':
            return https_fn.Response('', status=204, headers={**CORS_HEADERS, **PREFLIGHT_HEADERS})

        try:
            return json_response(self.dispatch(req))
        except DispatchError as e:
            return json_response(e.body(), status=e.status)

    def dispatch(self, req: https_fn.Request) -> dict:
        if req.method != 'POST':
            raise MethodNotAllowed()

        self.authenticate(req.headers.get(API_KEY_HEADER))

        try:
            update = UpdateNotificationRequest.from_json(req.get_json(silent=True))
        except MissingFieldsError:
            raise BadRequest("Missing required fields")

        try:
            message_id = self.gateway.send_to_topic(build_update_message(update))
        except GatewayError as e:
            logging.error(f"Error sending update notification: {e}")
            raise GatewayFailure(str(e))

        logging.info(
            f"Update notification sent successfully: messageId={message_id}, "
            f"versionName={update.version_name}, versionCode={update.version_code}"
        )
        return {
            "success": True,
            "messageId": message_id,
            "versionName": update.version_name,
            "versionCode": update.version_code,
        }

    def authenticate(self, provided):
        # compare_digest needs matching types; a missing header is compared as ''
        provided = provided or ''
        if not self.api_key or not hmac.compare_digest(provided.encode(), self.api_key.encode()):
            logging.warning("Unauthorized attempt to send update notification")
            raise Unauthorized()
