from headshot.serverless import handler  # noqa: F401
