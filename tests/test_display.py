"""Tests for display operations (00E0, DXYN)."""

import jax.numpy as jnp
from chipjax import execute, framebuffer, SCREEN_WIDTH
from chipjax.instructions.display import blit_sprite, clear_display
from conftest import setup_sprite_in_memory


def pixel(state, x, y):
    return int(state.display[y * SCREEN_WIDTH + x])


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        sprite = [0xC0, 0xC0]  # 11000000, 11000000
        state = setup_sprite_in_memory(fresh_state, 0x300, sprite)

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xD012)  # Draw at V0,V1 with height 2

        assert pixel(state, 10, 5) == 1
        assert pixel(state, 11, 5) == 1
        assert pixel(state, 10, 6) == 1
        assert pixel(state, 11, 6) == 1
        assert pixel(state, 12, 5) == 0
        assert jnp.sum(state.display) == 4
        assert state.V[15] == 0
        assert state.draw_flag
        assert state.pc == 0x208

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = setup_sprite_in_memory(fresh_state, 0x400, [0x80])

        state = execute(state, 0x6014)  # V0 = 20
        state = execute(state, 0x610A)  # V1 = 10
        state = execute(state, 0xA400)  # I = 0x400

        state = execute(state, 0xD011)
        assert pixel(state, 20, 10) == 1
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert pixel(state, 20, 10) == 0  # Erased by XOR
        assert state.V[15] == 1

    def test_partial_overlap_latches_collision(self, fresh_state):
        """One overlapping pixel is enough, and new pixels are still drawn."""
        state = setup_sprite_in_memory(fresh_state, 0x400, [0x80, 0xFF])
        state = execute(state, 0xA400)
        state = execute(state, 0xD011)  # Single pixel at (0, 0)
        state = execute(state, 0xA401)
        state = execute(state, 0xD011)  # Full row at (0, 0)

        assert state.V[15] == 1
        assert pixel(state, 0, 0) == 0
        assert all(pixel(state, x, 0) == 1 for x in range(1, 8))

    def test_draw_resets_vf(self, fresh_state):
        """VF is cleared when the sprite hits nothing."""
        state = setup_sprite_in_memory(fresh_state, 0xB00, [0x80])
        state = execute(state, 0x6F01)  # VF = 1
        state = execute(state, 0xAB00)
        state = execute(state, 0xD011)

        assert state.V[15] == 0


class TestScreenWrapping:
    """Test sprite wrapping at the screen edges."""

    def test_wraps_right_edge(self, fresh_state):
        """A sprite at x=60 continues on the left side of the same row."""
        state = setup_sprite_in_memory(fresh_state, 0x600, [0xFF])
        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0xA600)
        state = execute(state, 0xD011)

        for x in (60, 61, 62, 63, 0, 1, 2, 3):
            assert pixel(state, x, 0) == 1
        assert pixel(state, 4, 0) == 0

    def test_wraps_bottom_edge(self, fresh_state):
        """A sprite at y=30 continues at the top."""
        state = setup_sprite_in_memory(fresh_state, 0x700, [0x80, 0x80, 0x80])
        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x611E)  # V1 = 30
        state = execute(state, 0xA700)
        state = execute(state, 0xD013)

        assert pixel(state, 0, 30) == 1
        assert pixel(state, 0, 31) == 1
        assert pixel(state, 0, 0) == 1

    def test_coordinate_wrapping(self, fresh_state):
        """Coordinates beyond the screen are taken modulo its size."""
        state = setup_sprite_in_memory(fresh_state, 0x800, [0x80])
        state = execute(state, 0x6046)  # V0 = 70 (70 % 64 = 6)
        state = execute(state, 0x6125)  # V1 = 37 (37 % 32 = 5)
        state = execute(state, 0xA800)
        state = execute(state, 0xD011)

        assert pixel(state, 6, 5) == 1


class TestSpriteVariations:
    """Test different sprite configurations."""

    def test_only_n_rows_are_drawn(self, fresh_state):
        """Test sprites with different N values."""
        sprite = [0x80, 0x40, 0x20, 0x10, 0x08]  # Diagonal line
        state = setup_sprite_in_memory(fresh_state, 0x900, sprite)
        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6108)  # V1 = 8
        state = execute(state, 0xA900)
        state = execute(state, 0xD013)

        assert pixel(state, 10, 8) == 1
        assert pixel(state, 11, 9) == 1
        assert pixel(state, 12, 10) == 1
        assert pixel(state, 13, 11) == 0

    def test_zero_height_draws_nothing(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x900, [0xFF])
        state = execute(state, 0xA900)
        state = execute(state, 0xD010)

        assert jnp.sum(state.display) == 0
        assert state.V[15] == 0

    def test_font_glyph(self, fresh_state):
        """The built-in glyph for 0 is a 4x5 ring."""
        state = execute(fresh_state, 0xF029)  # I = glyph for V0 (0)
        state = execute(state, 0xD005)

        rows = framebuffer(state)[:5, :4]
        assert rows.tolist() == [
            [1, 1, 1, 1],
            [1, 0, 0, 1],
            [1, 0, 0, 1],
            [1, 0, 0, 1],
            [1, 1, 1, 1],
        ]


class TestClear:
    """Test 00E0."""

    def test_execute_clear_screen(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[:].set(1))

        state = execute(state, 0x00E0)

        assert jnp.sum(state.display) == 0
        assert state.display.shape == (2048,)
        assert state.draw_flag
        assert state.pc == 0x202


class TestBlitSprite:
    """Test the framebuffer helpers directly."""

    def test_blit_returns_collision(self):
        display = jnp.zeros(2048, dtype=jnp.uint8).at[0].set(1)
        rows = jnp.zeros(15, dtype=jnp.uint8).at[0].set(0xC0)

        display, collision = blit_sprite(display, 0, 0, rows, 1)

        assert collision
        assert display[0] == 0
        assert display[1] == 1

    def test_clear_display(self):
        display = jnp.ones(2048, dtype=jnp.uint8)
        assert jnp.sum(clear_display(display)) == 0
