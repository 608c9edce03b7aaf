from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from suiteflow.core.providers import (
    ArtifactProvider,
    BusinessServicesProvider,
    DatabaseProvider,
    LoggingProvider,
    MessagingProvider,
    MetricsProvider,
    RepositoryProvider,
    SettingsProvider,
)
from suiteflow.settings import Settings


def create_app_container(settings: Settings, *overrides: Provider) -> AsyncContainer:
    """
    Create the application DI container.

    Providers passed in ``overrides`` are registered last and win over the defaults.
    """
    return make_async_container(
        SettingsProvider(),
        LoggingProvider(),
        DatabaseProvider(),
        MessagingProvider(),
        MetricsProvider(),
        RepositoryProvider(),
        ArtifactProvider(),
        BusinessServicesProvider(),
        FastapiProvider(),
        *overrides,
        context={Settings: settings},
    )
