from .exceptions import InvariantViolation

def assert_block_order(blocks):
    orders = [block.order for block in blocks]
    if not orders:
        return

    expected = list(range(len(orders)))
    if orders != expected:
        raise InvariantViolation(
            f"Block orders do not follow array position starting from 0: {orders}"
        )

def assert_unique_ids(blocks):
    seen = set()
    for block in blocks:
        if block.id in seen:
            raise InvariantViolation(f"Duplicate block id: {block.id}")
        seen.add(block.id)

def assert_blocks(blocks):
    """
    Checked after every repository mutation.
    Single source of truth for block list consistency.
    """
    assert_unique_ids(blocks)
    assert_block_order(blocks)
