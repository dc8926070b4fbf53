from typing import Dict


class RequestSequencer:
    """Hands out increasing request numbers per channel.

    A view issues a number before calling the AI service and applies the
    answer only if that number is still the newest for its channel, so a
    slow response never overwrites the result of a later request.
    """

    def __init__(self):
        self._latest: Dict[str, int] = {}

    def issue(self, channel: str) -> int:
        token = self._latest.get(channel, 0) + 1
        self._latest[channel] = token
        return token

    def is_current(self, channel: str, token: int) -> bool:
        return self._latest.get(channel) == token

    def latest(self, channel: str) -> int:
        return self._latest.get(channel, 0)
