"""
Credential models supplied by the host credential store.
"""

from pydantic import AliasChoices, Field

from .base import HostModel


class OpenAICredentials(HostModel):
    """OpenAI API credentials (credential name: openAIApi)"""

    api_key: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("api_key", "apiKey", "openAIApiKey")
    )


class AzureOpenAICredentials(HostModel):
    """Azure OpenAI credentials (credential name: azureOpenAIApi)"""

    api_key: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("api_key", "apiKey", "azureOpenAIApiKey")
    )
    deployment_name: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices(
            "deployment_name", "deploymentName", "azureOpenAIApiDeploymentName"
        ),
    )
    instance_name: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("instance_name", "instanceName", "azureOpenAIApiInstanceName"),
    )
    api_version: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("api_version", "apiVersion", "azureOpenAIApiVersion"),
    )
