"""
Minimal jsonrelay application.

    python examples/hello_app.py
    curl http://localhost:4647/hello/Johnny
    {"status":200,"body":"Hello Johnny"}
"""

from jsonrelay.common.exceptions import NotFound
from jsonrelay.server import Controller, HandlerRegistry, ServerConfig, action, create_app, run

registry = HandlerRegistry()

USERS = {"1": {"id": "1", "name": "Johnny"}}


@registry.controller("application")
class Application(Controller):
    @action
    def default(self):
        return "jsonrelay is running"

    @action
    def greet(self):
        return f"Hello {self.params['name']}"


@registry.controller("users")
class Users(Controller):
    @action
    def show(self):
        user = USERS.get(self.params["id"])
        if user is None:
            raise NotFound(f"No user {self.params['id']}")
        return user


def startup(config, logger):
    logger.info("Serving from %s", config.ROOT)


app = create_app(registry, config=ServerConfig(), startup=startup)

if __name__ == "__main__":
    run(app)
