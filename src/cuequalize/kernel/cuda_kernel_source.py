# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

cuda_kernel_code = r'''
extern "C" {

// bin of an 8-bit sample: floor(value * nbins / 256)
__device__ __forceinline__ unsigned int bin_index(unsigned char value,
                                                  unsigned int nbins)
{
  return ((unsigned int)value * nbins) >> 8;
}

__global__ void global_histogram(const unsigned char *image,
                                 unsigned int *histogram,
                                 unsigned int total_size,
                                 unsigned int nbins)
{
  const unsigned int j = blockIdx.x * blockDim.x + threadIdx.x;

  if (j < total_size) {
    atomicAdd(&histogram[bin_index(image[j], nbins)], 1u);
  }
}

__global__ void local_histogram(const unsigned char *image,
                                unsigned int *histogram,
                                unsigned int total_size,
                                unsigned int nbins)
{
  extern __shared__ unsigned int local_hist[];

  const unsigned int tid = threadIdx.x;
  const unsigned int j = blockIdx.x * blockDim.x + tid;

  for (unsigned int b = tid; b < nbins; b += blockDim.x) {
    local_hist[b] = 0;
  }
  __syncthreads();

  if (j < total_size) {
    atomicAdd(&local_hist[bin_index(image[j], nbins)], 1u);
  }
  __syncthreads();

  // one global atomic per non-empty bin and block
  for (unsigned int b = tid; b < nbins; b += blockDim.x) {
    unsigned int count = local_hist[b];
    if (count) {
      atomicAdd(&histogram[b], count);
    }
  }
}

// single block of nbins threads; ping-pong between two halves of shared
// memory so a pass never reads a value written during the same pass
__global__ void hillis_steele_scan(const unsigned int *histogram,
                                   unsigned int *cumulative,
                                   unsigned int nbins)
{
  extern __shared__ unsigned int scan_buffer[];

  const unsigned int tid = threadIdx.x;
  unsigned int *src = scan_buffer;
  unsigned int *dst = scan_buffer + nbins;

  if (tid < nbins) {
    src[tid] = histogram[tid];
  }
  __syncthreads();

  for (unsigned int stride = 1; stride < nbins; stride <<= 1) {
    if (tid < nbins) {
      dst[tid] = (tid >= stride) ? src[tid] + src[tid - stride] : src[tid];
    }
    __syncthreads();
    unsigned int *tmp = src;
    src = dst;
    dst = tmp;
  }

  if (tid < nbins) {
    cumulative[tid] = src[tid];
  }
}

// single block of nbins / 2 threads, each owning two elements; scans data
// in place
__global__ void blelloch_scan(unsigned int *data, unsigned int nbins)
{
  extern __shared__ unsigned int tree[];

  const unsigned int tid = threadIdx.x;
  const unsigned int ai = 2 * tid;
  const unsigned int bi = 2 * tid + 1;
  const unsigned int a = data[ai];
  const unsigned int b = data[bi];
  unsigned int offset = 1;

  tree[ai] = a;
  tree[bi] = b;

  // up-sweep
  for (unsigned int d = nbins >> 1; d > 0; d >>= 1) {
    __syncthreads();
    if (tid < d) {
      unsigned int left = offset * (2 * tid + 1) - 1;
      unsigned int right = offset * (2 * tid + 2) - 1;
      tree[right] += tree[left];
    }
    offset <<= 1;
  }

  if (tid == 0) {
    tree[nbins - 1] = 0;
  }

  // down-sweep
  for (unsigned int d = 1; d < nbins; d <<= 1) {
    offset >>= 1;
    __syncthreads();
    if (tid < d) {
      unsigned int left = offset * (2 * tid + 1) - 1;
      unsigned int right = offset * (2 * tid + 2) - 1;
      unsigned int t = tree[left];
      tree[left] = tree[right];
      tree[right] += t;
    }
  }
  __syncthreads();

  // exclusive -> inclusive
  data[ai] = tree[ai] + a;
  data[bi] = tree[bi] + b;
}

__global__ void normalise_histogram(const unsigned int *cumulative,
                                    unsigned char *lookup,
                                    unsigned int nbins,
                                    float scale)
{
  const unsigned int j = blockIdx.x * blockDim.x + threadIdx.x;

  if (j < nbins) {
    float value = roundf((float)cumulative[j] * scale);
    value = fminf(fmaxf(value, 0.0f), 255.0f);
    lookup[j] = (unsigned char)value;
  }
}

// channels == 3: interleaved YCbCr, only luma (channel 0) is remapped
__global__ void equalise_image(const unsigned char *image,
                               unsigned char *output,
                               const unsigned char *lookup,
                               unsigned int total_size,
                               unsigned int nbins,
                               unsigned int channels)
{
  const unsigned int j = blockIdx.x * blockDim.x + threadIdx.x;

  if (j < total_size) {
    unsigned char value = image[j];
    if (channels == 3 && (j % 3) != 0) {
      output[j] = value;
    } else {
      output[j] = lookup[bin_index(value, nbins)];
    }
  }
}

}
'''
