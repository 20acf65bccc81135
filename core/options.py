#!/usr/bin/env python3
"""
Compiler Options Module
Configuration shared by the compiler passes, the exporter and the CLI
"""

from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_HEADER = "Auto-generated by: gltf-ngt-converter"


@dataclass
class CompilerOptions:
    """Options recognized by the compiler

    Attributes:
        precision: Fractional digits for numeric rounding
        keep_names: Emit name attributes for every named object
        keep_groups: Keep (empty) groups, disables the structural pruner
        bones: Lay out bones declaratively instead of opaque primitives
        shadows: Let meshes cast and receive shadows
        meta: Emit glTF extras as userData
        selector: Component selector
        name: Component class name
        debug: Log the scene tree and every pruning decision
        preload: Emit an injectGLTF.preload() statement
        draco: Draco decoder path, or True to use the default decoder
        header: Provenance text for the header comment
        root: Directory the asset is served from (used to build the asset URL)
    """
    precision: int = 3
    keep_names: bool = False
    keep_groups: bool = False
    bones: bool = False
    shadows: bool = False
    meta: bool = False
    selector: str = "app-model"
    name: str = "Model"
    debug: bool = False
    preload: bool = False
    draco: Optional[Union[str, bool]] = None
    header: Optional[str] = None
    root: Optional[str] = None

    def validate(self):
        """Check option values

        Returns:
            CompilerOptions: self

        Raises:
            ValueError: If an option value can not produce valid output
        """
        if self.precision < 0:
            raise ValueError(f"Precision must be >= 0, got {self.precision}")
        if not self.name.isidentifier():
            raise ValueError(f"Component name is not a valid identifier: {self.name!r}")
        if not self.selector or any(c.isspace() for c in self.selector):
            raise ValueError(f"Invalid component selector: {self.selector!r}")
        return self
