import firebase_admin
from firebase_functions import https_fn, firestore_fn, options

from config import REGION, UPDATE_API_KEY, get_update_api_key
from gateway import FcmTopicGateway
from handler import UpdateNotificationHandler
from version_watch import CONFIG_DOCUMENT, notify_on_version_change

firebase_admin.initialize_app()


def build_update_handler():
    """A handler wired to the key configured for this invocation and to FCM."""
    return UpdateNotificationHandler(api_key=get_update_api_key(), gateway=FcmTopicGateway())


def snapshot_data(snapshot):
    return snapshot.to_dict() if snapshot else {}


def handle_config_change(change):
    return notify_on_version_change(snapshot_data(change.before), snapshot_data(change.after), FcmTopicGateway())


@https_fn.on_request(region=REGION, memory=options.MemoryOption.MB_256, secrets=[UPDATE_API_KEY])
def send_update_notification(req: https_fn.Request) -> https_fn.Response:
    """
    Sends an 'update available' push to every device subscribed to the 'all' topic.

    POST https://<region>-<project>.cloudfunctions.net/send_update_notification
    Headers:
      x-api-key: <UPDATE_API_KEY>
    Body:
      {"versionName": "1.4.2", "versionCode": 42, "message": "Bug fixes and performance improvements"}
    """
    return build_update_handler().handle(req)


@firestore_fn.on_document_updated(
    document=CONFIG_DOCUMENT,
    region=REGION,
    memory=options.MemoryOption.MB_256
)
def on_update_config_changed(event: firestore_fn.Event[firestore_fn.Change[firestore_fn.DocumentSnapshot]]):
    """Trigger: broadcast the update when app_config/android_update gets a higher latest_version_code."""
    return handle_config_change(event.data)
