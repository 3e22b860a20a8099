"""Example bin/setup script built with the Python API.

Run with: python examples/bootstrap.py
"""

from __future__ import annotations

from bootcheck import Checklist, bootstrap, shell_action
from bootcheck.probe import ShellRunner


def redis_running(shell: ShellRunner) -> bool:
    return shell.sh("redis-cli ping >/dev/null 2>&1")


checklist = Checklist()
checklist.check("ruby", version="2.3.1", help="rbenv install 2.3.1")
checklist.check("node", version="^6.11.3", help="nvm install 6")
checklist.check("yarn", help="npm install -g yarn")
checklist.check("redis").osx(
    shell_action("brew list redis >/dev/null 2>&1 || brew install redis")
).ubuntu(
    shell_action(
        "dpkg -s redis-server >/dev/null 2>&1 || sudo apt-get install -y redis-server"
    )
)
checklist.check("redis-server", run=redis_running, help="Start redis first")
checklist.check_bundler()
checklist.bundle()

if __name__ == "__main__":
    bootstrap(checklist, verbose_shell=True)
