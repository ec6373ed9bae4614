from firebase_admin import messaging


class GatewayError(Exception):
    """The push gateway could not accept the message. str(e) is the gateway's own text."""


class FcmTopicGateway:
    """Sends topic messages through Firebase Cloud Messaging."""

    def send_to_topic(self, message: messaging.Message) -> str:
        try:
            return messaging.send(message)
        except Exception as e:
            raise GatewayError(str(e)) from e
