"""
Test helper functions and utilities shared by the test modules
"""

SAMPLE_TIMESTAMP = 1700000000000  # 2023-11-14T22:13:20Z in epoch milliseconds


class MailFixtureHelper:
    """Builders for backend JSON payloads"""

    @staticmethod
    def summary(**kwargs):
        """Summary payload as served by GET /api/emails"""
        defaults = {
            "ID": "a",
            "subject": "Hi",
            "from": "x@y.com",
            "timestamp": SAMPLE_TIMESTAMP,
        }
        defaults.update(kwargs)
        return defaults

    @staticmethod
    def detail(**kwargs):
        """Detail payload as served by GET /api/emails/{id}"""
        defaults = {
            "subject": "Hi",
            "from": "x@y.com",
            "to": ["z@w.com"],
            "timestamp": SAMPLE_TIMESTAMP,
            "html": False,
            "body": "hello",
        }
        defaults.update(kwargs)
        return defaults


async def settle(pilot, rounds: int = 4):
    """Let posted messages and the workers they start run to completion"""
    for _ in range(rounds):
        await pilot.pause()
        await pilot.app.workers.wait_for_complete()
    await pilot.pause()
