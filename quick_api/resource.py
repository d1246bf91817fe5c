"""
quick_api.resource
──────────────────
One-line CRUD resources. Most REST APIs expose the same set of calls for a
collection: list it, get one item by id, create, edit, update, delete one
and delete all. Declaring a resource generates those calls, bound to
``/{endpoint}`` and ``/{endpoint}/{id}``.

Usage::

    class Things(Resource, client=api, endpoint="things"):
        pass

    Things.list()                       # GET    /things
    Things.get("t_1")                   # GET    /things/t_1
    Things.create({"name": "x"})        # POST   /things
    Things.edit("t_1", {"name": "y"})   # PATCH  /things/t_1
    Things.update("t_1", {...})         # PUT    /things/t_1
    Things.delete_all()                 # DELETE /things
    Things.delete("t_1")                # DELETE /things/t_1

Operations named in ``exclude`` are never generated, so calling one raises
``AttributeError`` like any other missing attribute::

    class ReadOnlyThings(Resource, client=api, endpoint="things",
                         exclude={"create", "edit", "update", "delete", "delete_all"}):
        pass

``opts`` (a CallOptions) is fixed at definition time and forwarded on every
call; generated operations take no per-call options.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from quick_api.client import CallOptions, Client
from quick_api.tier0_core.errors import ResourceDefinitionError
from quick_api.tier0_core.logging import get_logger

log = get_logger(__name__)

OPERATIONS: tuple[str, ...] = ("list", "get", "create", "edit", "update", "delete_all", "delete")


# ── Definition ─────────────────────────────────────────────────────────────

class ResourceSpec(BaseModel):
    """Everything a resource needs, validated once when the class is created."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    client: Client
    endpoint: str
    exclude: frozenset[str] = Field(default_factory=frozenset)
    opts: Any = Field(default_factory=CallOptions)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        v = v.strip("/")
        if not v:
            raise ValueError("endpoint must not be empty")
        return v

    @field_validator("exclude", mode="before")
    @classmethod
    def validate_exclude(cls, v: Any) -> frozenset[str]:
        if isinstance(v, str):
            v = [v]
        names = frozenset(v or ())
        unknown = names - set(OPERATIONS)
        if unknown:
            raise ValueError(
                f"unknown operations {sorted(unknown)}; expected a subset of {list(OPERATIONS)}"
            )
        return names

    @field_validator("opts")
    @classmethod
    def validate_opts(cls, v: Any) -> CallOptions:
        if not isinstance(v, CallOptions):
            raise ValueError(f"opts must be a CallOptions, got {type(v).__name__}")
        return v

    @property
    def base_path(self) -> str:
        return f"/{self.endpoint}"

    def resource_path(self, resource_id: Any) -> str:
        return f"{self.base_path}/{resource_id}"

    @property
    def operations(self) -> tuple[str, ...]:
        return tuple(name for name in OPERATIONS if name not in self.exclude)


def _build_spec(**fields: Any) -> ResourceSpec:
    missing = [name for name in ("client", "endpoint") if fields.get(name) is None]
    if missing:
        raise ResourceDefinitionError(
            user_message=f"Resource definition is missing {', '.join(missing)}.",
        )
    if fields.get("opts") is None:
        fields.pop("opts", None)
    try:
        return ResourceSpec(**fields)
    except PydanticValidationError as exc:
        problems = {
            ".".join(str(loc) for loc in err["loc"]): err["msg"]
            for err in exc.errors()
        }
        raise ResourceDefinitionError(
            user_message="Invalid resource definition.",
            detail=f"Invalid resource definition: {problems}",
            fields=problems,
        ) from exc


# ── Operation factories ────────────────────────────────────────────────────
# Each factory closes over the ResourceSpec and returns the plain function that
# becomes a classmethod on the resource.

def _list(spec: ResourceSpec) -> Callable[..., Any]:
    def list(cls, params: Mapping[Any, Any] | None = None) -> Any:
        """List all resources."""
        return spec.client.get(spec.base_path, params or {}, spec.opts)
    return list


def _get(spec: ResourceSpec) -> Callable[..., Any]:
    def get(cls, resource_id: Any, params: Mapping[Any, Any] | None = None) -> Any:
        """Get a single resource by id."""
        return spec.client.get(spec.resource_path(resource_id), params or {}, spec.opts)
    return get


def _create(spec: ResourceSpec) -> Callable[..., Any]:
    def create(cls, params: Any) -> Any:
        """Create a new resource."""
        return spec.client.post(spec.base_path, params, spec.opts)
    return create


def _edit(spec: ResourceSpec) -> Callable[..., Any]:
    def edit(cls, resource_id: Any, params: Any) -> Any:
        """Partially update an existing resource (PATCH)."""
        return spec.client.patch(spec.resource_path(resource_id), params, spec.opts)
    return edit


def _update(spec: ResourceSpec) -> Callable[..., Any]:
    def update(cls, resource_id: Any, params: Any) -> Any:
        """Replace an existing resource (PUT)."""
        return spec.client.put(spec.resource_path(resource_id), params, spec.opts)
    return update


def _delete_all(spec: ResourceSpec) -> Callable[..., Any]:
    def delete_all(cls) -> Any:
        """Delete every resource in the collection."""
        return spec.client.delete(spec.base_path, spec.opts)
    return delete_all


def _delete(spec: ResourceSpec) -> Callable[..., Any]:
    def delete(cls, resource_id: Any) -> Any:
        """Delete a single resource by id."""
        return spec.client.delete(spec.resource_path(resource_id), spec.opts)
    return delete


_FACTORIES: dict[str, Callable[[ResourceSpec], Callable[..., Any]]] = {
    "list": _list,
    "get": _get,
    "create": _create,
    "edit": _edit,
    "update": _update,
    "delete_all": _delete_all,
    "delete": _delete,
}


# ── Resource base ──────────────────────────────────────────────────────────

class Resource:
    """
    Base class for generated resources. Subclass it with the class keywords
    ``client``, ``endpoint`` and optionally ``exclude`` and ``opts``.
    """

    spec: ClassVar[ResourceSpec]

    def __init_subclass__(
        cls,
        *,
        client: Client | None = None,
        endpoint: str | None = None,
        exclude: Iterable[str] = (),
        opts: CallOptions | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        if any(base is not Resource and issubclass(base, Resource) for base in cls.__bases__):
            raise ResourceDefinitionError(
                user_message=f"{cls.__name__} cannot extend an existing resource; "
                "declare a new Resource subclass instead.",
            )

        cls.spec = _build_spec(client=client, endpoint=endpoint, exclude=exclude, opts=opts)
        for name in cls.spec.operations:
            fn = _FACTORIES[name](cls.spec)
            fn.__qualname__ = f"{cls.__qualname__}.{name}"
            setattr(cls, name, classmethod(fn))

        log.debug(
            "resource.defined",
            resource=cls.__qualname__,
            base_path=cls.spec.base_path,
            operations=list(cls.spec.operations),
        )


def define_resource(
    name: str,
    *,
    client: Client,
    endpoint: str,
    exclude: Iterable[str] = (),
    opts: CallOptions | None = None,
) -> type[Resource]:
    """
    Build a resource class without a class statement.

    Usage:
        Things = define_resource("Things", client=api, endpoint="things")
    """
    return type(name, (Resource,), {}, client=client, endpoint=endpoint, exclude=exclude, opts=opts)


__all__ = ["OPERATIONS", "Resource", "ResourceSpec", "define_resource"]
