import logging

from gateway import GatewayError
from update_notification import UpdateNotificationRequest, build_update_message

CONFIG_DOCUMENT = 'app_config/android_update'


def _version_number(value):
    """Numeric value of a stored version code ("41" and 41 compare alike), or None if it has none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _flag(value):
    if isinstance(value, str):
        return value.strip().lower() == 'true'
    return value is True


def should_notify(before, after):
    """Only notify when latest_version_code strictly increases."""
    raw_new = (after or {}).get('latest_version_code')
    if raw_new is None:
        return False
    new_code = _version_number(raw_new)
    if new_code is None:
        logging.info(f"Unreadable latest_version_code {raw_new!r}, skipping notification")
        return False

    raw_old = (before or {}).get('latest_version_code')
    if raw_old is None:
        return True
    old_code = _version_number(raw_old)
    if old_code is None:
        logging.info(f"Unreadable previous latest_version_code {raw_old!r}, skipping notification")
        return False
    return new_code > old_code


def notify_on_version_change(before, after, gateway):
    """
    Sends the update broadcast for an app_config/android_update change.
    Returns the FCM message id, or None when the version code did not go up.
    """
    if not should_notify(before, after):
        logging.info("Version code not increased, skipping notification")
        return None

    update = UpdateNotificationRequest(
        version_name=after.get('latest_version_name'),
        version_code=after['latest_version_code'],
        message=after.get('update_message') or None,
        force_update=_flag(after.get('force_update', False)),
    )

    try:
        message_id = gateway.send_to_topic(build_update_message(update))
    except GatewayError as e:
        logging.error(f"Error sending auto notification: {e}")
        raise

    logging.info(f"Auto notification sent for version: {update.version_name} (messageId={message_id})")
    return message_id
