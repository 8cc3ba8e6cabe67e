from ..core import ElementDefinition

LIST_TAGS = ("ul", "ol")

DEFINITIONS = [
    ElementDefinition(tag_names=["ul"], style_class="list-disc pl-6 mb-4"),
    ElementDefinition(tag_names=["ol"], style_class="list-decimal pl-6 mb-4"),
    ElementDefinition(tag_names=["li"], style_class="mb-1"),
]
