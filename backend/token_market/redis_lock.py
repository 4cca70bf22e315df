# token_market/redis_lock.py
import os
import socket
import time
import uuid

import redis
from django.conf import settings

# compare-and-act on the owner token, atomically on the server
RENEW_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("pexpire", KEYS[1], ARGV[2])
end
return 0
"""

RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


def get_redis():
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)


class LeaseLost(RuntimeError):
    pass


class Lease:
    """
    Expiring ownership of one Redis key, so only one price sampler runs
    across all hosts. The holder calls keep_alive() from its loop; if the
    key expired and someone else took it, keep_alive() raises LeaseLost.
    """

    def __init__(self, key: str, ttl_seconds: int, client=None):
        self.key = key
        self.ttl_ms = int(ttl_seconds * 1000)
        self.owner = f"{socket.gethostname()}:{os.getpid()}:{uuid.uuid4().hex[:12]}"
        self.client = client or get_redis()
        self._renew = self.client.register_script(RENEW_SCRIPT)
        self._release = self.client.register_script(RELEASE_SCRIPT)
        self._renew_at = None

    def _schedule_renewal(self):
        # renew once a third of the ttl has passed
        self._renew_at = time.monotonic() + self.ttl_ms / 3000

    def acquire(self) -> bool:
        if not self.client.set(self.key, self.owner, nx=True, px=self.ttl_ms):
            return False
        self._schedule_renewal()
        return True

    def keep_alive(self):
        if self._renew_at is None:
            raise LeaseLost(f"Lease {self.key} was never acquired")
        if time.monotonic() < self._renew_at:
            return
        if not self._renew(keys=[self.key], args=[self.owner, self.ttl_ms]):
            self._renew_at = None
            raise LeaseLost(f"Lease {self.key} is now held by someone else")
        self._schedule_renewal()

    def release(self) -> bool:
        self._renew_at = None
        return bool(self._release(keys=[self.key], args=[self.owner]))
