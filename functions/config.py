import os

from firebase_admin import firestore
from firebase_functions import params

# Set with: firebase functions:secrets:set UPDATE_API_KEY
UPDATE_API_KEY = params.SecretParam("UPDATE_API_KEY")

REGION = os.environ.get("FUNCTION_REGION", "us-central1")


def _get_firestore_api_key():
    """Fetch the update API key from Firestore config/update document."""
    db = firestore.client()
    doc = db.collection('config').document('update').get()
    if doc.exists:
        api_key = (doc.to_dict() or {}).get('api_key')
        return api_key if isinstance(api_key, str) else ''
    return ''


def get_update_api_key():
    """
    Returns the key callers must send in the x-api-key header.
    The deployed secret wins; Firestore config/update.api_key is the fallback.
    An empty string means no key is configured and every call is refused.
    """
    secret = UPDATE_API_KEY.value
    if secret:
        return secret
    return _get_firestore_api_key()
