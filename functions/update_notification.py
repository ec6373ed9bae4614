from dataclasses import dataclass
from typing import Any, Optional

from firebase_admin import messaging

UPDATE_TOPIC = 'all'
UPDATE_TITLE = 'Update Available'
UPDATE_CHANNEL_ID = 'update_channel'
UPDATE_ICON = 'ic_notification'
CLICK_ACTION = 'FLUTTER_NOTIFICATION_CLICK'

REQUIRED_FIELDS = ['versionName', 'versionCode']
OPTIONAL_FIELDS = ['message', 'forceUpdate']


class MissingFieldsError(ValueError):
    """Raised when versionName or versionCode is absent from the request body."""

    def __init__(self, missing):
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}")


@dataclass(frozen=True)
class UpdateNotificationRequest:
    version_name: Any
    version_code: Any
    message: Optional[str] = None
    force_update: bool = False

    @classmethod
    def from_json(cls, body) -> 'UpdateNotificationRequest':
        """
        Builds a request from a decoded JSON body.
        Anything that is not a JSON object counts as an empty body.
        """
        if not isinstance(body, dict):
            body = {}

        missing = [field for field in REQUIRED_FIELDS if not body.get(field)]
        if missing:
            raise MissingFieldsError(missing)

        force_update = body.get('forceUpdate')
        return cls(
            version_name=body['versionName'],
            version_code=body['versionCode'],
            message=body.get('message') or None,
            force_update=False if force_update is None else force_update,
        )

    @property
    def body(self) -> str:
        if self.message:
            return self.message
        return f"Version {self.version_name} is now available. Tap to update."


def _data_value(value) -> str:
    # FCM data maps only carry strings; keep JSON spelling for bools and whole numbers
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_update_data(req: UpdateNotificationRequest) -> dict:
    return {
        "type": "update",
        "versionCode": _data_value(req.version_code),
        "versionName": _data_value(req.version_name),
        "forceUpdate": _data_value(req.force_update),
        "click_action": CLICK_ACTION,
    }


def build_update_message(req: UpdateNotificationRequest) -> messaging.Message:
    """Builds the 'update available' broadcast for every subscriber of the 'all' topic."""
    return messaging.Message(
        notification=messaging.Notification(
            title=UPDATE_TITLE,
            body=req.body,
        ),
        data=build_update_data(req),
        topic=UPDATE_TOPIC,
        android=messaging.AndroidConfig(
            priority='high',
            notification=messaging.AndroidNotification(
                channel_id=UPDATE_CHANNEL_ID,
                priority='high',
                default_vibrate_timings=True,
                icon=UPDATE_ICON,
            ),
        ),
    )
