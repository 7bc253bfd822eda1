from tutor.app import create_app
from tutor.config import Settings
from tutor.inference import build_backend
from tutor.log import configure_logging
from tutor.store import SessionStore
import statsd

settings = Settings.from_env()
configure_logging(settings.log_level)

metrics = statsd.StatsClient(host=settings.graphite_host, port=settings.graphite_host_port, prefix=settings.metrics_prefix)
store = SessionStore.from_url(settings.database_url)

# create all tables
store.create_tables()

app = create_app(settings=settings, inference=build_backend(settings, metrics), store=store, metrics=metrics)
