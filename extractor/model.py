# extractor/model.py
import numpy as np
import tensorflow as tf
import tensorflow_hub as hub


def load_hub_model(module_url):
    """Load a TF-Hub image classifier and return batch -> activations."""
    model = hub.load(module_url)

    def predict(batch):
        logits = model(tf.convert_to_tensor(batch, dtype=tf.float32))
        return tf.nn.softmax(logits).numpy().astype(np.float32)

    return predict
