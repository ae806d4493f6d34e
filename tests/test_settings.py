from linebot.settings import (
    LineColor,
    LineFollowConfig,
    ObstacleAvoidConfig,
    color_mask,
    default_line_follow_config,
    default_obstacle_avoid_config,
)


def test_color_mask_black_and_red():
    assert color_mask(LineColor.BLACK, LineColor.RED) == 3


def test_color_mask_empty():
    assert color_mask() == 0


def test_color_mask_is_idempotent_for_repeats():
    assert color_mask(LineColor.BLUE, LineColor.BLUE) == color_mask(LineColor.BLUE)


def test_default_config_allows_black_and_red_only():
    cfg = default_line_follow_config()
    assert cfg.allows(LineColor.BLACK)
    assert cfg.allows(LineColor.RED)
    assert not cfg.allows(LineColor.GREEN)
    assert not cfg.allows(LineColor.BLUE)


def test_allows_follows_mask_changes():
    cfg = LineFollowConfig(allowed_mask=color_mask(LineColor.GREEN, LineColor.BLUE))
    assert cfg.allows(LineColor.GREEN)
    assert cfg.allows(LineColor.BLUE)
    assert not cfg.allows(LineColor.BLACK)


def test_default_line_follow_speeds():
    cfg = default_line_follow_config()
    assert (cfg.base_speed, cfg.turn_speed) == (150, 120)
    assert cfg.match_thresh == 0.18
    assert cfg.bg_margin == 0.05


def test_builtin_line_follow_defaults_differ_from_robot_defaults():
    builtin = LineFollowConfig()
    assert (builtin.base_speed, builtin.turn_speed) == (140, 110)
    assert builtin.allowed_mask == default_line_follow_config().allowed_mask


def test_obstacle_defaults():
    cfg = default_obstacle_avoid_config()
    assert cfg.drive_speed == 150
    assert cfg.turn_90_ms == 600
    assert ObstacleAvoidConfig().drive_speed == 140
    assert cfg.avoidance_threshold_cm == ObstacleAvoidConfig().avoidance_threshold_cm