from ..core import ElementDefinition

# Inline and block text tags that commonly survive a word-processor paste.
DEFINITIONS = [
    ElementDefinition(tag_names=["p"], style_class="mb-4 leading-relaxed"),
    ElementDefinition(tag_names=["strong", "b"], style_class="font-semibold"),
    ElementDefinition(tag_names=["em", "i"], style_class="italic"),
    ElementDefinition(tag_names=["center"], style_class="text-center"),
]
