"""Joining of walk results with correlated docs and validation plans."""

from schemadoc.correlation import Docs
from schemadoc.logging import get_schemadoc_logger
from schemadoc.objectdoc.models import ObjectDoc, PropertyDoc
from schemadoc.planning import ValidatorPlan

logger = get_schemadoc_logger(__name__)


def extend_with_validation_plan(doc: ObjectDoc, plan: ValidatorPlan) -> ObjectDoc:
    """Replace properties with the plan's facts for the same path.

    Facts do not know the structure of the type, so the replaced property keeps
    its children paths, and its type info when the fact carries none. Facts for
    paths the walk never produced are ignored.
    """
    index = {prop.path: i for i, prop in enumerate(doc.properties)}
    properties = list(doc.properties)
    for fact in plan.properties:
        i = index.get(fact.path)
        if i is None:
            logger.debug("Validation plan for %s has facts for unknown path %s", plan.name, fact.path)
            continue
        current = properties[i]
        properties[i] = PropertyDoc.model_validate({
            **dict(fact),
            "type_info": fact.type_info or current.type_info,
            "children_paths": current.children_paths,
        })
    return doc.model_copy(update={"name": plan.name or doc.name, "properties": tuple(properties)})


def merge_docs(doc: ObjectDoc, docs: Docs) -> ObjectDoc:
    """Copy correlated docs onto properties.

    A property gets its type's doc by qualified name; the members of that
    entry give the field docs of the properties one segment below it.
    Properties without a matching entry are left as they are.
    """
    index = {prop.path: i for i, prop in enumerate(doc.properties)}
    updates: list[dict[str, str]] = [{} for _ in doc.properties]
    for i, prop in enumerate(doc.properties):
        if prop.type_info is None or not prop.type_info.namespace:
            continue
        entry = docs.get(prop.key)
        if entry is None:
            continue
        updates[i]["type_doc"] = entry.doc
        for name, member in entry.members.items():
            j = index.get(f"{prop.path}.{name}")
            if j is not None:
                updates[j]["field_doc"] = member.doc

    properties = tuple(prop.model_copy(update=update) if update else prop for prop, update in zip(doc.properties, updates, strict=True))
    return doc.model_copy(update={"properties": properties})
