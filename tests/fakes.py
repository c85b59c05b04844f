import asyncio


class FakeAnalyzer:
    """Stands in for the vision service: answers ``answer`` (or raises it)."""

    def __init__(self, answer="1.10"):
        self.answer = answer
        self.calls = 0

    async def analyze(self, image: bytes) -> str:
        self.calls += 1
        # let other uploads run while "the network" is busy
        await asyncio.sleep(0.01)
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer
