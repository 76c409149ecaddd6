import gymnasium as gym

from .sphere_env import SphereEnv

gym.register(id="FlipSphere-v0", entry_point="flipsphere.env.sphere_env:SphereEnv")

__all__ = ["SphereEnv"]
