from ..core import ElementDefinition

# Embedded content keeps the attributes it needs to stay functional.
DEFINITION = ElementDefinition(
    tag_names=["embed", "iframe", "object", "video", "audio", "source"],
    style_class="embed-responsive",
    embeddable=True,
    preserved_attrs=["src", "width", "height", "type"]
)
