"""Fixed defaults for the slim Microsoft Graph build.

Everything the pipeline needs besides the two CLI switches lives here: the
spec URL, the endpoint allow-list, root type names, output locations, the
dependency manifests behind the build descriptor, and the compatibility
contract the shim restores.

The manifests must list every support library the generated source imports.
When the Kiota version in use changes its emitted imports, update the
matching manifest here. Nothing verifies this before the downstream build.
"""

from __future__ import annotations

from slimsdk.models import CompatibilitySpec, DependencyManifest, DependencyPin

SPEC_URL = (
    "https://raw.githubusercontent.com/microsoftgraph/msgraph-metadata/"
    "master/openapi/v1.0/openapi.yaml"
)

INCLUDE_PATHS: tuple[str, ...] = (
    "/me",
    "/me/messages/**",
    "/me/mailFolders/**",
    "/me/sendMail",
    "/users/{user-id}/messages/**",
    "/users/{user-id}/sendMail",
)

LANGUAGE = "csharp"
CLASS_NAME = "GraphServiceClient"
PACKAGE_VERSION = "1.0.0"

NAMESPACES: dict[str, str] = {
    "csharp": "Microsoft.Graph",
    "python": "msgraph_slim",
}

OUTPUT_DIRS: dict[str, str] = {
    "csharp": "out/Microsoft.Graph.Slim",
    "python": "out/msgraph-slim",
}


def _nuget(name: str, version_range: str) -> DependencyPin:
    return DependencyPin(name=name, version_range=version_range)


_KIOTA_DOTNET = "[1.16.0, 2.0.0)"

CSHARP_MANIFEST = DependencyManifest(
    runtime="netstandard2.0",
    package_id="Microsoft.Graph.Slim",
    version=PACKAGE_VERSION,
    description="Reduced Microsoft Graph client (mail endpoints only).",
    dependencies=(
        _nuget("Microsoft.Graph.Core", "[3.2.0, 4.0.0)"),
        _nuget("Microsoft.Kiota.Abstractions", _KIOTA_DOTNET),
        _nuget("Microsoft.Kiota.Authentication.Azure", _KIOTA_DOTNET),
        _nuget("Microsoft.Kiota.Http.HttpClientLibrary", _KIOTA_DOTNET),
        _nuget("Microsoft.Kiota.Serialization.Form", _KIOTA_DOTNET),
        _nuget("Microsoft.Kiota.Serialization.Json", _KIOTA_DOTNET),
        _nuget("Microsoft.Kiota.Serialization.Multipart", _KIOTA_DOTNET),
        _nuget("Microsoft.Kiota.Serialization.Text", _KIOTA_DOTNET),
    ),
    compat_flags={
        "LangVersion": "latest",
        "NoWarn": "$(NoWarn);CS1591;CS0618",
        "SignAssembly": "false",
    },
)

_KIOTA_PYTHON = ">=1.9,<2.0"

PYTHON_MANIFEST = DependencyManifest(
    runtime=">=3.10",
    package_id="msgraph-slim",
    version=PACKAGE_VERSION,
    description="Reduced Microsoft Graph client (mail endpoints only).",
    dependencies=(
        DependencyPin(name="httpx", version_range=">=0.23,<1.0"),
        DependencyPin(name="msgraph-core", version_range=">=1.1,<2.0"),
        DependencyPin(name="microsoft-kiota-abstractions", version_range=_KIOTA_PYTHON),
        DependencyPin(name="microsoft-kiota-http", version_range=_KIOTA_PYTHON),
        DependencyPin(name="microsoft-kiota-serialization-form", version_range=_KIOTA_PYTHON),
        DependencyPin(name="microsoft-kiota-serialization-json", version_range=_KIOTA_PYTHON),
        DependencyPin(name="microsoft-kiota-serialization-multipart", version_range=_KIOTA_PYTHON),
        DependencyPin(name="microsoft-kiota-serialization-text", version_range=_KIOTA_PYTHON),
    ),
)

MANIFESTS: dict[str, DependencyManifest] = {
    "csharp": CSHARP_MANIFEST,
    "python": PYTHON_MANIFEST,
}

COMPAT_SPECS: dict[str, CompatibilitySpec] = {
    "csharp": CompatibilitySpec(
        contract_version="5",
        target_surface="v1.0",
        version_prefix="graph-dotnet",
        default_base_url="https://graph.microsoft.com/v1.0",
    ),
    "python": CompatibilitySpec(
        contract_version="1",
        target_surface="v1.0",
        version_prefix="graph-python",
        default_base_url="https://graph.microsoft.com/v1.0",
    ),
}
