import hydra
from hydra.utils import to_absolute_path
from omegaconf import DictConfig
import pyrootutils

# project root setup
root = pyrootutils.setup_root(__file__, dotenv=True, pythonpath=True)

from gvg_renderer.core import export_image, render_operations_to_image  # noqa: E402
from gvg_renderer.scene import load_program  # noqa: E402


@hydra.main(version_base=None, config_path="config", config_name="run")
def main(cfg: DictConfig) -> None:

    # Instantiate the compiler from config
    compiler = hydra.utils.instantiate(cfg.compiler)
    program = load_program(to_absolute_path(cfg.scene))
    operations = compiler.compile(program)
    print(f"✅ Compiled '{cfg.scene}' into {len(operations)} draw operations")

    # Preview the compiled scene.
    image = render_operations_to_image(
        operations,
        canvas_dim=cfg.preview.canvas_dim,
        coord_bound=cfg.preview.coord_bound,
        width_scale=cfg.preview.width_scale,
    )
    export_image(image, to_absolute_path(cfg.output))
    print(f"✅ Preview saved to: {cfg.output}")


if __name__ == "__main__":
    main()
