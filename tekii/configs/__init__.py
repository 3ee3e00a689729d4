from tekii.configs.anniversary import ANNIVERSARY_CONFIG
from tekii.configs.era import ERA_CONFIG

ALL_CONFIGS = (ERA_CONFIG, ANNIVERSARY_CONFIG)
