import os
import sys

import requests

# Configuration
PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID", "")
REGION = os.environ.get("FUNCTION_REGION", "us-central1")
FUNCTION_URL = os.environ.get(
    "FUNCTION_URL",
    f"https://{REGION}-{PROJECT_ID}.cloudfunctions.net/send_update_notification",
)
API_KEY = os.environ.get("UPDATE_API_KEY", "")


def clear_screen():
    print("\033[H\033[J", end="")


def build_body(version_name, version_code, message=None, force_update=False):
    body = {
        "versionName": version_name,
        "versionCode": version_code,
        "forceUpdate": force_update,
    }
    if message:
        body["message"] = message
    return body


def send_request(version_name, version_code, message=None, force_update=False):
    """POSTs one update notification. Returns the decoded response, or None on a network error."""
    print("\nSending Update Notification...")
    try:
        response = requests.post(
            FUNCTION_URL,
            json=build_body(version_name, version_code, message, force_update),
            headers={"Content-Type": "application/json", "x-api-key": API_KEY},
            timeout=30,
        )
    except requests.RequestException as e:
        print(f"❌ Network Error: {e}")
        return None

    try:
        result = response.json()
    except ValueError:
        result = {"error": response.text}

    if response.status_code == 200:
        print(f"✅ Success! Message ID: {result.get('messageId')}")
    else:
        print(f"❌ Failed. Status: {response.status_code}")
        print(result.get("error"))
    return result


def _parse_version_code(raw):
    return int(raw) if raw.isdigit() else raw


def manual_update():
    print("\n--- 🚀 Update Notification ---")
    version_name = input("Version name (e.g. 1.4.2): ").strip()
    if not version_name: return

    version_code = input("Version code (e.g. 42): ").strip()
    if not version_code: return

    message = input("Message (blank for default): ").strip() or None
    force_update = input("Force update? (y/n): ").lower().startswith('y')

    print("\nPreview:")
    print(f"Version: {version_name} ({version_code})")
    print(f"Message: {message or f'Version {version_name} is now available. Tap to update.'}")
    print(f"Force update: {force_update}")

    if input("\nSend now? (y/n): ").lower().startswith('y'):
        send_request(version_name, _parse_version_code(version_code), message, force_update)
    else:
        print("Cancelled.")
    input("\nPress Enter to continue...")


def main():
    if not API_KEY:
        print("UPDATE_API_KEY is not set.")
        sys.exit(1)

    while True:
        clear_screen()
        print("📢 Update Notification Tools")
        print("============================")
        print("1. Send Update Notification")
        print("2. Exit")

        choice = input("\nSelect option: ").strip()

        if choice == '1':
            manual_update()
        elif choice == '2':
            print("Bye!")
            sys.exit()
        else:
            input("Invalid option.")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nExiting...")
