from ..core import ElementDefinition

TABLE_SECTION_TAGS = ("thead", "tbody", "tfoot")

DEFINITIONS = [
    ElementDefinition(tag_names=["table"], style_class="specifications-table"),
    ElementDefinition(tag_names=["th"], style_class="border px-4 py-2 text-left font-semibold"),
    ElementDefinition(tag_names=["td"], style_class="border px-4 py-2"),
]
