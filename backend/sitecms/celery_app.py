"""
Celery wiring for background jobs (layout translation, demo theme sync).

Every task runs inside an application context. Jobs submitted while a
context is already active (eager mode in tests, CLI) reuse it, so they share
the caller's database session.

Worker::

    celery -A celery_worker worker -Q translation --concurrency 1
    celery -A celery_worker worker -Q default
"""
from celery import Celery, Task
from flask import Flask, has_app_context


def celery_init_app(app: Flask) -> Celery:
    class FlaskTask(Task):
        def __call__(self, *args, **kwargs):
            if has_app_context():
                return self.run(*args, **kwargs)
            with app.app_context():
                return self.run(*args, **kwargs)

    celery_app = Celery(app.name, task_cls=FlaskTask)
    celery_app.config_from_object(app.config["CELERY"])
    celery_app.set_default()

    # Register the shared tasks with this app
    from sitecms.tasks import theme_tasks, translation_tasks  # noqa: F401

    app.extensions["celery"] = celery_app
    return celery_app
