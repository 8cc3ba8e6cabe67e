from ..core import ElementDefinition

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


# --- ELEMENT DEFINITIONS ---

DEFINITIONS = [
    ElementDefinition(tag_names=["h1"], style_class="text-3xl font-bold mb-4"),
    ElementDefinition(tag_names=["h2"], style_class="text-2xl font-semibold mb-3"),
    ElementDefinition(tag_names=["h3"], style_class="text-xl font-semibold mb-2"),
    ElementDefinition(tag_names=["h4"], style_class="text-lg font-semibold mb-2"),
    ElementDefinition(tag_names=["h5"], style_class="text-base font-medium mb-1"),
    ElementDefinition(tag_names=["h6"], style_class="text-sm font-medium mb-1"),
]
