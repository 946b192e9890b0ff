"""Asset container contents: cached, filterable file listings."""
from .container import AssetContainer
from .deps import build_container
from .features.contents import AssetContainerContents

__all__ = ["AssetContainer", "AssetContainerContents", "build_container"]
