class DummyContext:
    """Minimal stand-in for fastmcp.Context in tool-level tests."""

    def __init__(self):
        self.log_info = []
        self.log_warning = []
        self.log_error = []
        self._state = {}

    async def info(self, message):
        self.log_info.append(message)

    async def warning(self, message):
        self.log_warning.append(message)

    async def error(self, message):
        self.log_error.append(message)

    def set_state(self, key, value):
        self._state[key] = value

    def get_state(self, key):
        return self._state.get(key)
