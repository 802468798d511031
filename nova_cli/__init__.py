"""nova-cli -- scaffolding and local-development orchestrator for Nova.js projects.

Modules:
    scaffolder  - template resolution and materialization (``nova new``)
    generators  - controller / middleware / migration boilerplate
    devserver   - ``nova dev`` / ``nova build`` process orchestration
    database    - migration tool passthrough (``nova db:*``)
    cli         - command dispatcher
"""

__version__ = "0.1.0"
