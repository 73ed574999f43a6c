# Largest quantity a single line item can hold. Adds past it are clamped.
MAX_ITEM_QUANTITY: int = 100
