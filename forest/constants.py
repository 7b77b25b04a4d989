Vec2 = tuple[float, float]
ChunkKey = tuple[int, int]

TICKS_PER_SECOND = 60
REFERENCE_FRAME_MS = 16.67
MAX_FRAME_MS = 100.0

MOVEMENT_SMOOTHING = 0.15
ARRIVAL_EPSILON_SQ = 0.1
ANIMATION_FRAME_MS = 120.0
ANIMATION_FRAME_COUNT = 6

PLACEMENT_ATTEMPTS = 50
PLACEMENT_BUFFER = 10.0
DEFAULT_ELEMENT_SIZE = 10.0

TREE_ID_BASE = 1_000_000
BUSH_ID_BASE = 2_000_000
FLOWER_ID_BASE = 3_000_000

CHUNK_SEED_STRIDE = 10000
BUSH_SEED_OFFSET = 1
FLOWER_SEED_OFFSET = 2

VISIBILITY_PADDING = 100.0
POSE_SAMPLE_INTERVAL_MS = 100.0

# Player feet region inside the character sprite.
HITBOX_SIDE_INSET = 16.0
HITBOX_FOOT_INSET = 8.0

MINIMAP_SIZE = 180
MINIMAP_MARKER_SIZES = {
    "trees": 4,
    "bushes": 3,
}

FLOWER_COLORS = (
    "#FF5733",
    "#DAF7A6",
    "#FFC300",
    "#C70039",
    "#900C3F",
    "#581845",
    "#FFFFFF",
    "#FFC0CB",
    "#3D85C6",
)

DAY_START_HOUR = 8.0
DAY_PHASES = (
    (6.0, 8.0, "dawn"),
    (8.0, 18.0, "day"),
    (18.0, 20.0, "dusk"),
)
