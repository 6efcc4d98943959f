"""Standalone HTML viewer for generated glTF files."""

import json
import logging
import os
from pathlib import Path
from string import Template

logger = logging.getLogger(__name__)

THREE_VERSION = "0.160.0"

VIEWER_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>extuml viewer</title>
  <style>
    html, body { margin: 0; height: 100%; overflow: hidden; background: #101418; }
  </style>
  <script type="importmap">
    {
      "imports": {
        "three": "https://unpkg.com/three@$three_version/build/three.module.js",
        "three/addons/": "https://unpkg.com/three@$three_version/examples/jsm/"
      }
    }
  </script>
</head>
<body>
<script type="module">
import * as THREE from "three";
import { GLTFLoader } from "three/addons/loaders/GLTFLoader.js";
import { OrbitControls } from "three/addons/controls/OrbitControls.js";

const GLTF_PATH = $gltf_path;

const renderer = new THREE.WebGLRenderer({ antialias: true });
renderer.setPixelRatio(window.devicePixelRatio);
renderer.setSize(window.innerWidth, window.innerHeight);
document.body.appendChild(renderer.domElement);

const scene = new THREE.Scene();
const camera = new THREE.PerspectiveCamera(50, window.innerWidth / window.innerHeight, 0.1, 1000);
const controls = new OrbitControls(camera, renderer.domElement);
const billboards = [];

function labelTexture(text) {
  const lines = text.split("\\n");
  const canvas = document.createElement("canvas");
  canvas.width = 512;
  canvas.height = 512;
  const ctx = canvas.getContext("2d");
  ctx.fillStyle = "rgba(255, 255, 255, 0.9)";
  ctx.fillRect(0, 0, canvas.width, canvas.height);
  ctx.fillStyle = "#194d66";
  ctx.font = "28px monospace";
  lines.forEach((line, i) => ctx.fillText(line, 24, 48 + i * 34));
  const texture = new THREE.CanvasTexture(canvas);
  texture.colorSpace = THREE.SRGBColorSpace;
  return texture;
}

function placeCamera(hint) {
  if (!hint) {
    camera.position.set(0, 0, 10);
    return;
  }
  const [theta, phi, radius] = hint.recommended.orbit;
  const target = new THREE.Vector3(...hint.recommended.target);
  const t = THREE.MathUtils.degToRad(theta);
  const p = THREE.MathUtils.degToRad(phi);
  camera.position.set(
    target.x + radius * Math.sin(p) * Math.sin(t),
    target.y + radius * Math.cos(p),
    target.z + radius * Math.sin(p) * Math.cos(t)
  );
  controls.target.copy(target);
}

new GLTFLoader().load(GLTF_PATH, (gltf) => {
  gltf.scene.traverse((object) => {
    const extuml = object.userData.extuml;
    if (object.isMesh && extuml && extuml.type === "text") {
      object.material = new THREE.MeshBasicMaterial({
        map: labelTexture(extuml.text),
        transparent: true,
        side: THREE.DoubleSide,
      });
    }
    if (object.userData.billboard) {
      billboards.push(object);
    }
  });
  scene.add(gltf.scene);
  const extras = gltf.parser.json.asset.extras || {};
  placeCamera(extras.camera);
  controls.update();
});

window.addEventListener("resize", () => {
  camera.aspect = window.innerWidth / window.innerHeight;
  camera.updateProjectionMatrix();
  renderer.setSize(window.innerWidth, window.innerHeight);
});

renderer.setAnimationLoop(() => {
  billboards.forEach((object) => object.quaternion.copy(camera.quaternion));
  controls.update();
  renderer.render(scene, camera);
});
</script>
</body>
</html>
""")


def render_viewer(gltf_path):
    """Return the viewer page loading ``gltf_path``"""
    return VIEWER_TEMPLATE.substitute(three_version=THREE_VERSION, gltf_path=json.dumps(str(gltf_path)))


def write_viewer(html_path, gltf_path):
    """
    Write an HTML viewer next to a glTF file.

    Parameters:
        html_path: output HTML file; missing directories are created
        gltf_path: glTF file to load, referenced relative to the HTML file

    Example:
        write_viewer("out/index.html", "out/model.gltf")  # loads "model.gltf"
    """
    html_path = Path(html_path)
    html_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        relative = os.path.relpath(gltf_path, html_path.parent)
    except ValueError:
        # No relative path between different drives
        relative = str(gltf_path)

    html_path.write_text(render_viewer(Path(relative).as_posix()), encoding="utf-8")
    logger.debug("wrote viewer %s for %s", html_path, relative)
