"""Container configuration schema."""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bindery.domain.base.di_contracts import DIScope


class ContainerConfig(BaseModel):
    """DI container configuration."""
    model_config = ConfigDict(extra="forbid")

    default_scope: DIScope = Field(DIScope.TRANSIENT, description="Scope used when bind() is given none")
    detect_cycles: bool = Field(True, description="Raise CircularDependencyError on binding cycles")
    seal_on_first_resolve: bool = Field(
        False, description="Close the registration phase on the first resolve() call"
    )
    seal_after_bootstrap: bool = Field(
        False, description="Seal the container once configured bindings are applied"
    )

    # Abstract key -> concrete type identifier (dotted path or catalogued name)
    bindings: Dict[str, str] = Field(default_factory=dict, description="Key to target bindings")
    singletons: List[str] = Field(default_factory=list, description="Keys resolved once and cached")

    @model_validator(mode="after")
    def validate_keys(self) -> "ContainerConfig":
        """Reject blank keys and targets."""
        for key, target in self.bindings.items():
            if not key.strip() or not target.strip():
                raise ValueError(f"Binding entries must not be blank: {key!r} -> {target!r}")
        for key in self.singletons:
            if not key.strip():
                raise ValueError("Singleton keys must not be blank")
        return self
